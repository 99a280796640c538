"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "BLOCKDOC_"


class Settings(BaseModel):
    app_name:         str  = "blockdoc"
    parser_config:    str  = Field(default="commonmark", description="MarkdownIt preset for text, list, and quote content")
    highlight_fences: bool = Field(default=True,  description="Highlight fenced code inside Markdown content")
    safe_urls:        bool = Field(default=False, description="Drop non-http(s) image/embed URLs before escaping")
    json_indent:      int  = Field(default=2, ge=0, description="Indent for serialized documents")
    log_level:        str  = Field(default="WARNING", pattern="^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")
    output_dir:       str  = Field(default="dist", description="Directory for rendered HTML/Markdown files")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOCKDOC_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
