"""Exception taxonomy for block construction, document mutation, rendering, and validation"""

from typing import Any, Iterable


class BlockDocError(Exception):
    """Base class for every error raised by blockdoc."""


class MissingIdError(BlockDocError, ValueError):
    def __init__(self):
        super().__init__("Block ID is required")


class InvalidTypeError(BlockDocError, ValueError):
    def __init__(self, block_type: Any, allowed: Iterable[str]):
        self.block_type = block_type
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid block type: {block_type}. Allowed types are: {', '.join(self.allowed)}"
        )


class MissingRequiredFieldError(BlockDocError, ValueError):
    def __init__(self, block_type: str, field: str):
        self.block_type = block_type
        self.field = field
        super().__init__(f'Block of type "{block_type}" requires property "{field}"')


class DuplicateIdError(BlockDocError, ValueError):
    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f'Block with ID "{block_id}" already exists')


class BlockNotFoundError(BlockDocError, LookupError):
    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f'Block with ID "{block_id}" not found')


class InvalidPositionError(BlockDocError, IndexError):
    def __init__(self, position: Any):
        self.position = position
        super().__init__(f"Invalid position: {position}")


class InvalidArticleStructureError(BlockDocError, ValueError):
    def __init__(self):
        super().__init__("Invalid article structure")


class MissingArticleError(BlockDocError, ValueError):
    def __init__(self):
        super().__init__("Invalid BlockDoc document: missing article property")


class ValidationError(BlockDocError, ValueError):
    """Schema validation failed. `errors` holds one dict per violated rule."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        summary = "; ".join(f"{e['path'] or '<root>'}: {e['message']}" for e in errors)
        super().__init__(f"Invalid BlockDoc document: {summary}")
