"""Wire-format rules for serialized documents, expressed as strict pydantic models.

Block construction only checks that required fields are present. These models
check values as well: id pattern, heading range, URI urls, string list items.
Keep the per-type fields in sync with blockdoc.core.block.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator
from pydantic import ValidationError as PydanticValidationError

from blockdoc.errors import ValidationError


BLOCK_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class _BlockSchema(BaseModel):
    model_config = ConfigDict(extra="allow")
    id:      StrictStr = Field(pattern=BLOCK_ID_PATTERN)
    content: StrictStr = ""


class TextBlockSchema(_BlockSchema):
    type: Literal["text"]


class HeadingBlockSchema(_BlockSchema):
    type:  Literal["heading"]
    level: StrictInt = Field(ge=1, le=6)


class ImageBlockSchema(_BlockSchema):
    type:    Literal["image"]
    url:     AnyUrl
    alt:     StrictStr
    caption: Optional[StrictStr] = None


class CodeBlockSchema(_BlockSchema):
    type:     Literal["code"]
    language: StrictStr


class ListBlockSchema(_BlockSchema):
    type:      Literal["list"]
    items:     list[StrictStr]
    list_type: Literal["ordered", "unordered"] = Field(alias="listType")


class QuoteBlockSchema(_BlockSchema):
    type:        Literal["quote"]
    attribution: Optional[StrictStr] = None


class EmbedBlockSchema(_BlockSchema):
    type:       Literal["embed"]
    url:        AnyUrl
    embed_type: Optional[StrictStr] = Field(default=None, alias="embedType")
    caption:    Optional[StrictStr] = None


class DividerBlockSchema(_BlockSchema):
    type: Literal["divider"]


BlockSchema = Annotated[
    Union[
        TextBlockSchema, HeadingBlockSchema, ImageBlockSchema, CodeBlockSchema,
        ListBlockSchema, QuoteBlockSchema, EmbedBlockSchema, DividerBlockSchema,
    ],
    Field(discriminator="type"),
]


class ArticleMetadata(BaseModel):
    """Well-known metadata keys; anything else passes through."""
    model_config = ConfigDict(extra="allow")
    author:         Optional[StrictStr] = None
    published_date: Optional[datetime] = Field(default=None, alias="publishedDate")
    tags:           Optional[list[StrictStr]] = None


class ArticleSchema(BaseModel):
    title:    StrictStr
    metadata: ArticleMetadata = Field(default_factory=ArticleMetadata)
    blocks:   list[BlockSchema]

    @model_validator(mode="after")
    def _unique_block_ids(self) -> "ArticleSchema":
        seen = set()
        for block in self.blocks:
            if block.id in seen:
                raise ValueError(f'Duplicate block ID "{block.id}"')
            seen.add(block.id)
        return self


class DocumentSchema(BaseModel):
    """Top-level persisted shape: {"article": {...}}"""
    article: ArticleSchema


def _describe(error: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "path": ".".join(str(part) for part in error["loc"]),
        "message": error["msg"],
        "type": error["type"],
    }


def validate_document(data: Any) -> bool:
    """Return True if data matches the document schema, else raise ValidationError."""
    try:
        DocumentSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError([_describe(err) for err in e.errors()]) from e
    return True


def json_schema() -> dict[str, Any]:
    """The document rules as a JSON Schema dict."""
    return DocumentSchema.model_json_schema(by_alias=True)
