"""Typed content blocks: per-type construction checks and plain-data projection"""

from enum import Enum
from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blockdoc.errors import InvalidTypeError, MissingIdError, MissingRequiredFieldError


class BlockType(str, Enum):
    """Restrict blocks to the eight renderable kinds"""
    text = "text"
    heading = "heading"
    image = "image"
    code = "code"
    list = "list"
    quote = "quote"
    embed = "embed"
    divider = "divider"


ALLOWED_TYPES: tuple[str, ...] = tuple(t.value for t in BlockType)

_CORE_KEYS = {"id", "type", "content"}
_IMMUTABLE_KEYS = {"id", "type"}


class Block(BaseModel):
    """A single typed content unit, addressable by id.

    Each kind is a subclass declaring its own known fields. Keys a kind does not
    declare are kept in the pydantic extra bag and written back out as sibling
    keys by to_dict(), so custom fields survive a round trip unchanged.

    Known fields are typed Any: construction only checks presence. Value
    checks (integer levels, URI urls, ...) belong to the schema validator.
    """
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    # Wire names that must be present in the constructing data, in check order
    required_fields: ClassVar[tuple[str, ...]] = ()

    id: str
    type: BlockType
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _content_as_text(cls, value: Any) -> str:
        if not value:
            return ""
        return value if isinstance(value, str) else str(value)

    @classmethod
    def from_dict(cls, data: "Mapping[str, Any] | Block") -> "Block":
        """Build the Block subclass for data['type'].

        Checks run in a fixed order: id, type, then each required field of the
        kind. A required field given as None or "" counts as present.
        """
        if isinstance(data, Block):
            data = data.to_dict()
        if not data.get("id"):
            raise MissingIdError()

        block_type = data.get("type")
        if block_type not in ALLOWED_TYPES:
            raise InvalidTypeError(block_type, ALLOWED_TYPES)

        model = BLOCK_MODELS[BlockType(block_type)]
        for name in model.required_fields:
            if name not in data:
                raise MissingRequiredFieldError(BlockType(block_type).value, name)

        return model.model_validate(dict(data))

    def update(self, data: Mapping[str, Any]) -> "Block":
        """Apply data in place and return self. id and type are silently kept.

        No per-type checks run here; Document.update_block re-validates instead.
        """
        fields = type(self).model_fields
        for key, value in data.items():
            if key in _IMMUTABLE_KEYS:
                continue
            name = self._field_name(key)
            if name in fields:
                setattr(self, name, value)
            else:
                # setattr would resolve names like "text" or "copy" to class attributes
                self.__pydantic_extra__[key] = value
                self.__pydantic_fields_set__.add(key)
        return self

    def _field_name(self, key: str) -> str:
        """Map a wire alias (listType) to its field name (list_type)."""
        for name, info in type(self).model_fields.items():
            if info.alias == key:
                return name
        return key

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view: id, type, content first, then set fields and extras."""
        data: dict[str, Any] = {"id": self.id, "type": self.type, "content": self.content}
        data.update(self.model_dump(by_alias=True, exclude_unset=True, exclude=_CORE_KEYS))
        return data

    # --- convenience constructors ---

    @classmethod
    def text(cls, block_id: str, content: str) -> "Block":
        return Block.from_dict({"id": block_id, "type": "text", "content": content})

    @classmethod
    def heading(cls, block_id: str, level: int, content: str) -> "Block":
        return Block.from_dict({"id": block_id, "type": "heading", "level": level, "content": content})

    @classmethod
    def image(cls, block_id: str, url: str, alt: str, caption: str = None) -> "Block":
        data = {"id": block_id, "type": "image", "content": "", "url": url, "alt": alt}
        if caption:
            data["caption"] = caption
        return Block.from_dict(data)

    @classmethod
    def code(cls, block_id: str, language: str, content: str) -> "Block":
        return Block.from_dict({"id": block_id, "type": "code", "language": language, "content": content})

    @classmethod
    def list(cls, block_id: str, items, list_type: str = "unordered") -> "Block":
        return Block.from_dict({
            "id": block_id, "type": "list", "content": "", "items": items, "listType": list_type,
        })


class TextBlock(Block):
    """Markdown prose."""


class HeadingBlock(Block):
    required_fields = ("level",)
    level: Any


class ImageBlock(Block):
    required_fields = ("url", "alt")
    url: Any
    alt: Any
    caption: Any = None


class CodeBlock(Block):
    required_fields = ("language",)
    language: Any


class ListBlock(Block):
    """Items are Markdown fragments; list_type is 'ordered' or 'unordered'."""
    required_fields = ("items", "listType")
    items: Any
    list_type: Any = Field(alias="listType")


class QuoteBlock(Block):
    attribution: Any = None


class EmbedBlock(Block):
    url: Any = None
    embed_type: Any = Field(default=None, alias="embedType")
    caption: Any = None


class DividerBlock(Block):
    pass


BLOCK_MODELS: dict[BlockType, type[Block]] = {
    BlockType.text:    TextBlock,
    BlockType.heading: HeadingBlock,
    BlockType.image:   ImageBlock,
    BlockType.code:    CodeBlock,
    BlockType.list:    ListBlock,
    BlockType.quote:   QuoteBlock,
    BlockType.embed:   EmbedBlock,
    BlockType.divider: DividerBlock,
}
