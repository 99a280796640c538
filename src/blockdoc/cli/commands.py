"""CLI command implementations"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from blockdoc.config import Settings, load_config
from blockdoc.core.document import Document
from blockdoc.core.render.html import renderer_from_settings
from blockdoc.core.schema import json_schema
from blockdoc.errors import BlockDocError, ValidationError
from blockdoc.logging_config import configure_logging


class RenderFormat(str, Enum):
    html = "html"
    markdown = "markdown"


SUFFIXES = {RenderFormat.html: "html", RenderFormat.markdown: "md"}


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _load(path: Path) -> Document:
    """Read and construct a Document, exiting 1 on unreadable or malformed input."""
    try:
        return Document.from_json(path.read_text(encoding="utf-8"))
    except (OSError, BlockDocError, ValueError) as e:
        _fail(f"Could not load {path}", e)


def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Loguru level, e.g. DEBUG or WARNING")] = None,
    ):
    """Configure logging before any command runs."""
    settings = _settings(overrides={"log_level": log_level.upper() if log_level else None})
    configure_logging(settings.log_level)


def render_cmd(
    path: Annotated[Path, typer.Argument(help="BlockDoc JSON file to render")],
    fmt: Annotated[RenderFormat, typer.Option("--format", "-f", help="Output format")] = RenderFormat.html,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    safe_urls: Annotated[Optional[bool], typer.Option("--safe-urls/--no-safe-urls", help="Drop non-http(s) URLs")] = None,
    ):
    """Render a document to HTML or Markdown."""
    settings = _settings(overrides={"output_dir": out, "safe_urls": safe_urls})
    doc = _load(path)

    if fmt == RenderFormat.html:
        text = doc.render_to_html(renderer_from_settings(settings))
    else:
        text = doc.render_to_markdown()

    output_dir = Path(settings.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    out_file = output_dir / f"{path.stem}.{SUFFIXES[fmt]}"
    out_file.write_text(text, encoding="utf-8")
    typer.echo(f"  {path} -> {out_file}")


def validate_cmd(
    path: Annotated[Path, typer.Argument(help="BlockDoc JSON file to validate")],
    ):
    """Check a document against the BlockDoc schema."""
    doc = _load(path)
    try:
        doc.validate()
    except ValidationError as e:
        typer.echo(f"Invalid: {path}", err=True)
        for err in e.errors:
            typer.echo(f"  {err['path'] or '<root>'}: {err['message']}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Valid: {path} ({len(doc.article.blocks)} block(s))")


def schema_cmd():
    """Print the document JSON Schema."""
    settings = _settings()
    typer.echo(json.dumps(json_schema(), indent=settings.json_indent))
