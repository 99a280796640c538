"""Helpers shared by the HTML and Markdown renderers"""

from typing import Any, Mapping

from blockdoc.core.models import Article
from blockdoc.errors import InvalidArticleStructureError


DEFAULT_HEADING_LEVEL = 2


def unpack_article(article: Any) -> tuple[str, dict[str, Any], list]:
    """Return (title, metadata, blocks) from an Article or an article-shaped mapping."""
    if isinstance(article, Article):
        return article.title, article.metadata, article.blocks
    if isinstance(article, Mapping) and isinstance(article.get("blocks"), (list, tuple)):
        return article.get("title") or "", article.get("metadata") or {}, list(article["blocks"])
    raise InvalidArticleStructureError()


def heading_level(value: Any) -> int:
    """Round value and clamp to 1..6; missing, zero, or non-numeric levels become 2."""
    try:
        level = round(float(value))
    except (TypeError, ValueError, OverflowError):
        level = 0
    return min(max(level or DEFAULT_HEADING_LEVEL, 1), 6)
