"""Article payload owned by a Document"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Article(BaseModel):
    """Title, free-form metadata, and the ordered plain-data blocks of a document."""
    title:    str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    blocks:   list[dict[str, Any]] = Field(default_factory=list)   # display order

    @field_validator("title", mode="before")
    @classmethod
    def _title_as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
