"""HTML renderer: Article -> HTML, one renderer per block type"""

from typing import Any, Callable, Mapping
from urllib.parse import parse_qs, urlparse

from loguru import logger

from blockdoc.config import Settings, load_config
from blockdoc.core.block import BlockType
from blockdoc.core.render.common import heading_level, unpack_article
from blockdoc.core.render.engines import (
    Highlighter, MarkdownConverter, PygmentsHighlighter, highlight_code, make_markdown,
)
from blockdoc.core.utils.sanitize import sanitize_html, sanitize_url


YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/"
YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com"}
TWITTER_WIDGET = '<script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>'


def extract_youtube_id(url: Any) -> str | None:
    """Video id from a youtu.be path or a youtube.com ?v= parameter; None if unparseable."""
    if not isinstance(url, str):
        return None
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError:
        return None

    if host == "youtu.be":
        return parsed.path[1:] or None
    if host in YOUTUBE_HOSTS:
        values = parse_qs(parsed.query).get("v")
        return values[0] if values else None
    return None


def _figure(inner: str, caption: Any) -> str:
    """Wrap inner in a <figure> with an escaped caption, or return it unchanged."""
    if not caption:
        return inner
    return (
        f'<figure class="blockdoc-figure">{inner}'
        f'<figcaption class="blockdoc-caption">{sanitize_html(caption)}</figcaption></figure>'
    )


class HtmlRenderer:
    """Renders articles to HTML with explicit markdown and highlighting capabilities.

    to_html converts trusted Markdown (text, list items, quotes) to HTML and is
    the sanitization boundary for that content; every other field is escaped here.
    With safe_urls, image/embed URLs are reduced to http(s) or relative before escaping.
    """

    def __init__(
        self,
        to_html: MarkdownConverter = None,
        highlighter: Highlighter = None,
        safe_urls: bool = False,
        ):
        self.highlighter = highlighter or PygmentsHighlighter()
        self.to_html = to_html or make_markdown(highlighter=self.highlighter).render
        self.safe_urls = safe_urls
        self._renderers: dict[str, Callable[[Mapping], str]] = {
            BlockType.text.value:    self.render_text,
            BlockType.heading.value: self.render_heading,
            BlockType.image.value:   self.render_image,
            BlockType.code.value:    self.render_code,
            BlockType.list.value:    self.render_list,
            BlockType.quote.value:   self.render_quote,
            BlockType.embed.value:   self.render_embed,
            BlockType.divider.value: self.render_divider,
        }

    def _url(self, url: Any) -> str:
        return sanitize_html(sanitize_url(url) if self.safe_urls else url)

    # --- per-type renderers ---

    def render_text(self, block: Mapping) -> str:
        return self.to_html(block.get("content") or "")

    def render_heading(self, block: Mapping) -> str:
        level = heading_level(block.get("level"))
        return f"<h{level}>{sanitize_html(block.get('content'))}</h{level}>"

    def render_image(self, block: Mapping) -> str:
        img = (
            f'<img src="{self._url(block.get("url"))}" '
            f'alt="{sanitize_html(block.get("alt"))}" class="blockdoc-image" />'
        )
        return _figure(img, block.get("caption"))

    def render_code(self, block: Mapping) -> str:
        language = block.get("language")
        code = highlight_code(self.highlighter, block.get("content") or "", language)
        css = f"blockdoc-code language-{sanitize_html(language)}" if language else "blockdoc-code"
        return f'<pre class="blockdoc-pre"><code class="{css}">{code}</code></pre>'

    def render_list(self, block: Mapping) -> str:
        items = block.get("items")
        if not isinstance(items, (list, tuple)):
            return "<p>Invalid list items</p>"
        list_type = block.get("listType")
        tag = "ol" if list_type == "ordered" else "ul"
        items_html = "".join(f"<li>{self.to_html(str(item))}</li>" for item in items)
        return f'<{tag} class="blockdoc-list blockdoc-list-{sanitize_html(list_type)}">{items_html}</{tag}>'

    def render_quote(self, block: Mapping) -> str:
        html = f'<blockquote class="blockdoc-quote">{self.to_html(block.get("content") or "")}</blockquote>'
        if block.get("attribution"):
            html += f'<cite class="blockdoc-attribution">{sanitize_html(block["attribution"])}</cite>'
        return html

    def render_embed(self, block: Mapping) -> str:
        url = block.get("url")
        embed_type = block.get("embedType")

        if embed_type == "youtube":
            video_id = extract_youtube_id(url)
            if video_id:
                embed = (
                    '<div class="blockdoc-embed-container">'
                    f'<iframe width="560" height="315" src="{YOUTUBE_EMBED_URL}{sanitize_html(video_id)}" '
                    'frameborder="0" allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
                    'gyroscope; picture-in-picture" allowfullscreen></iframe></div>'
                )
            else:
                logger.warning(f"Invalid YouTube URL {url!r} in block {block.get('id')!r}")
                embed = "<p>Invalid YouTube URL</p>"
        elif embed_type == "twitter":
            embed = (
                '<div class="blockdoc-embed blockdoc-twitter">'
                f'<blockquote class="twitter-tweet"><a href="{self._url(url)}"></a></blockquote>'
                f"{TWITTER_WIDGET}</div>"
            )
        else:
            embed = (
                '<div class="blockdoc-embed">'
                f'<iframe src="{self._url(url)}" frameborder="0" width="100%" height="400" allowfullscreen>'
                "</iframe></div>"
            )

        return _figure(embed, block.get("caption"))

    def render_divider(self, block: Mapping) -> str:
        return '<hr class="blockdoc-divider" />'

    # --- document ---

    def render_block(self, block: Mapping) -> str:
        """Render one block inside its wrapper div; unknown types become a placeholder."""
        block_type = block.get("type")
        renderer = self._renderers.get(block_type) if isinstance(block_type, str) else None
        if renderer is None:
            logger.warning(f"Unknown block type {block_type!r} in block {block.get('id')!r}")
            content = f"<p>Unknown block type: {sanitize_html(block_type)}</p>"
        else:
            content = renderer(block)

        kind, block_id = sanitize_html(block_type), sanitize_html(block.get("id"))
        return (
            f'<div class="blockdoc-block blockdoc-{kind}" data-block-id="{block_id}" '
            f'data-block-type="{kind}">{content}</div>'
        )

    def render(self, article) -> str:
        title, _, blocks = unpack_article(article)
        html = [
            '<article class="blockdoc-article">',
            f'<h1 class="blockdoc-title">{sanitize_html(title)}</h1>',
        ]
        html.extend(self.render_block(block) for block in blocks)
        html.append("</article>")
        return "\n".join(html)


def renderer_from_settings(settings: Settings) -> HtmlRenderer:
    """Build an HtmlRenderer from the markdown preset, fence, and URL options in settings."""
    highlighter = PygmentsHighlighter()
    markdown = make_markdown(settings.parser_config, highlighter if settings.highlight_fences else None)
    return HtmlRenderer(to_html=markdown.render, highlighter=highlighter, safe_urls=settings.safe_urls)


def render_to_html(article, renderer: HtmlRenderer = None) -> str:
    """Render an Article (or article-shaped mapping) to HTML.

    Without a renderer, one is built for this call from the current config.yaml and BLOCKDOC_ env vars.
    """
    if renderer is None:
        renderer = renderer_from_settings(load_config())
    return renderer.render(article)
