"""Markdown renderer: Article -> Markdown text, one renderer per block type"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping

from loguru import logger

from blockdoc.core.block import BlockType
from blockdoc.core.render.common import heading_level, unpack_article


_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _parse_date(value: Any) -> date | None:
    """Accept date/datetime objects, ISO-8601 strings, or epoch milliseconds."""
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_long_date(value: Any) -> str:
    """Render a date as 'Fri Sep 22 2023' independent of locale; unparseable values pass through."""
    parsed = _parse_date(value)
    if parsed is None:
        return str(value)
    return f"{_DAYS[parsed.weekday()]} {_MONTHS[parsed.month - 1]} {parsed.day:02d} {parsed.year}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def render_text(block: Mapping) -> str:
    # Text content is already Markdown
    return _text(block.get("content"))


def render_heading(block: Mapping) -> str:
    return f"{'#' * heading_level(block.get('level'))} {_text(block.get('content'))}"


def render_image(block: Mapping) -> str:
    markdown = f"![{_text(block.get('alt'))}]({_text(block.get('url'))})"
    if block.get("caption"):
        markdown += f"\n*{block['caption']}*"
    return markdown


def render_code(block: Mapping) -> str:
    return f"```{_text(block.get('language'))}\n{_text(block.get('content'))}\n```"


def render_list(block: Mapping) -> str:
    items = block.get("items")
    if not isinstance(items, (list, tuple)):
        return "[Invalid list items]"
    if block.get("listType") == "ordered":
        return "\n".join(f"{n}. {item}" for n, item in enumerate(items, start=1))
    return "\n".join(f"- {item}" for item in items)


def render_quote(block: Mapping) -> str:
    markdown = "\n".join(f"> {line}" for line in _text(block.get("content")).split("\n"))
    if block.get("attribution"):
        markdown += f"\n>\n>  {block['attribution']}"
    return markdown


def render_embed(block: Mapping) -> str:
    url = _text(block.get("url"))
    markdown = f"[{block.get('embedType') or 'Embedded content'}: {url}]({url})"
    if block.get("caption"):
        markdown += f"\n*{block['caption']}*"
    return markdown


def render_divider(block: Mapping) -> str:
    return "---"


BLOCK_RENDERERS: dict[str, Callable[[Mapping], str]] = {
    BlockType.text.value:    render_text,
    BlockType.heading.value: render_heading,
    BlockType.image.value:   render_image,
    BlockType.code.value:    render_code,
    BlockType.list.value:    render_list,
    BlockType.quote.value:   render_quote,
    BlockType.embed.value:   render_embed,
    BlockType.divider.value: render_divider,
}


def render_block(block: Mapping) -> str:
    """Render one block; unknown types become a visible placeholder."""
    block_type = block.get("type")
    renderer = BLOCK_RENDERERS.get(block_type) if isinstance(block_type, str) else None
    if renderer is None:
        logger.warning(f"Unknown block type {block_type!r} in block {block.get('id')!r}")
        return f"[Unknown block type: {block_type}]"
    return renderer(block)


def _metadata_lines(metadata: Mapping) -> list[str]:
    lines = []
    if metadata.get("author"):
        lines.append(f"> Author: {metadata['author']}")
    if metadata.get("publishedDate"):
        lines.append(f"> Published: {format_long_date(metadata['publishedDate'])}")
    tags = metadata.get("tags")
    if isinstance(tags, (list, tuple)) and tags:
        lines.append(f"> Tags: {', '.join(str(t) for t in tags)}")
    return lines


def render_to_markdown(article) -> str:
    """Render an Article (or article-shaped mapping) to Markdown.

    Layout: '# title', blank line, optional '> ' metadata lines plus a blank
    line, then each block followed by a blank line.
    """
    title, metadata, blocks = unpack_article(article)
    lines = [f"# {title}", ""]

    if metadata:
        lines.extend(_metadata_lines(metadata))
        lines.append("")

    for block in blocks:
        lines.append(render_block(block))
        lines.append("")

    return "\n".join(lines)
