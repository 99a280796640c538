"""Document: owns an Article and exposes block CRUD, reordering, validation, and rendering"""

import json
from typing import Any, Iterable, Mapping

from loguru import logger

from blockdoc.config import load_config
from blockdoc.core.block import Block
from blockdoc.core.models import Article
from blockdoc.core.render.html import HtmlRenderer, render_to_html
from blockdoc.core.render.markdown import render_to_markdown
from blockdoc.core.schema import validate_document
from blockdoc.errors import (
    BlockNotFoundError, DuplicateIdError, InvalidPositionError, MissingArticleError,
)


BlockData = Mapping[str, Any] | Block


def _block_id(data: BlockData) -> Any:
    return data.id if isinstance(data, Block) else data.get("id")


class Document:
    """A titled, ordered collection of blocks.

    Blocks are stored as plain dicts (Block.to_dict() projections). A Block
    returned by add_block/insert_block is a separate object; changing it does
    not change the document. Use update_block for that.

    Not thread-safe: callers sharing a Document must serialize mutations.
    """

    def __init__(self, title: str, metadata: dict[str, Any] = None, blocks: Iterable[BlockData] = None):
        self.article = Article(title=title, metadata=metadata or {})
        # Initial blocks go through add_block so duplicate and per-type checks apply
        for data in blocks or []:
            self.add_block(data)

    # --- lookup ---

    def _index_of(self, block_id: Any) -> int | None:
        for i, block in enumerate(self.article.blocks):
            if block.get("id") == block_id:
                return i
        return None

    def get_block(self, block_id: str) -> dict[str, Any] | None:
        """Return the stored plain-data block with block_id, or None."""
        index = self._index_of(block_id)
        return None if index is None else self.article.blocks[index]

    # --- mutation ---

    def _new_block(self, data: BlockData) -> Block:
        block_id = _block_id(data)
        if block_id and self.get_block(block_id) is not None:
            raise DuplicateIdError(block_id)
        return Block.from_dict(data)

    def add_block(self, data: BlockData) -> Block:
        """Construct a block from data and append it. Raises DuplicateIdError or a construction error."""
        block = self._new_block(data)
        self.article.blocks.append(block.to_dict())
        logger.debug(f"Added {block.type} block {block.id!r}")
        return block

    def insert_block(self, data: BlockData, position: int) -> Block:
        """Construct a block and insert it at position.

        Positions follow list.insert: past the end appends, negative counts
        from the end. Unlike move_block, no bounds error is raised.
        """
        block = self._new_block(data)
        self.article.blocks.insert(position, block.to_dict())
        logger.debug(f"Inserted {block.type} block {block.id!r} at {position}")
        return block

    def update_block(self, block_id: str, updates: Mapping[str, Any]) -> dict[str, Any]:
        """Shallow-merge updates over the stored block and re-validate it as a new Block.

        Raises BlockNotFoundError if block_id is unknown, DuplicateIdError if the
        update renames the block onto another block's id.
        """
        index = self._index_of(block_id)
        if index is None:
            raise BlockNotFoundError(block_id)

        merged = {**self.article.blocks[index], **updates}
        new_id = merged.get("id")
        if new_id != block_id and self._index_of(new_id) is not None:
            raise DuplicateIdError(new_id)

        block = Block.from_dict(merged)
        self.article.blocks[index] = block.to_dict()
        logger.debug(f"Updated block {block_id!r}")
        return self.article.blocks[index]

    def remove_block(self, block_id: str) -> bool:
        """Remove the first block with block_id. Returns False if none matched."""
        index = self._index_of(block_id)
        if index is None:
            return False
        del self.article.blocks[index]
        logger.debug(f"Removed block {block_id!r}")
        return True

    def move_block(self, block_id: str, new_position: int) -> bool:
        """Move a block to new_position in [0, len-1]; other blocks keep their relative order.

        Returns False if block_id is unknown; raises InvalidPositionError if out of range.
        """
        index = self._index_of(block_id)
        if index is None:
            return False
        if new_position < 0 or new_position >= len(self.article.blocks):
            raise InvalidPositionError(new_position)

        block = self.article.blocks.pop(index)
        self.article.blocks.insert(new_position, block)
        logger.debug(f"Moved block {block_id!r} from {index} to {new_position}")
        return True

    # --- validation and rendering ---

    def validate(self) -> bool:
        """Check the document against the schema. Returns True or raises ValidationError."""
        return validate_document(self.to_dict())

    def render_to_html(self, renderer: HtmlRenderer = None) -> str:
        return render_to_html(self.article, renderer)

    def render_to_markdown(self) -> str:
        return render_to_markdown(self.article)

    # --- serialization ---

    def to_dict(self) -> dict[str, Any]:
        return {"article": self.article.model_dump()}

    def to_json(self, indent: int = None) -> str:
        """Serialize to JSON text; indent defaults to the configured json_indent (2 unless overridden)."""
        if indent is None:
            indent = load_config().json_indent
        return json.dumps({"article": self.article.model_dump(mode="json")}, indent=indent, ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_json()

    @classmethod
    def from_json(cls, data: str | bytes | Mapping[str, Any]) -> "Document":
        """Build a Document from a JSON string or {"article": ...} mapping.

        Every block is re-constructed, so malformed blocks fail here rather than at render time.
        """
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        article = data.get("article") if isinstance(data, Mapping) else None
        if not isinstance(article, Mapping):
            raise MissingArticleError()
        return cls(
            title=article.get("title"),
            metadata=article.get("metadata") or {},
            blocks=article.get("blocks") or [],
        )
