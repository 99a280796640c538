"""Rendering engines: markdown-it-py for CommonMark -> HTML, pygments for code highlighting.

The HTML renderer receives these as explicit capabilities instead of reading
process-wide engine configuration, so tests can pass stubs.
"""

from typing import Callable, Protocol

import pygments
from loguru import logger
from markdown_it import MarkdownIt
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from blockdoc.core.utils.sanitize import sanitize_html


MarkdownConverter = Callable[[str], str]


class Highlighter(Protocol):
    def has_language(self, name: str) -> bool: ...
    def highlight(self, code: str, language: str) -> str: ...
    def highlight_auto(self, code: str) -> str: ...


class PygmentsHighlighter:
    """Highlighter backed by pygments; emits bare <span> markup (no <pre> wrapper)."""

    def __init__(self, formatter: HtmlFormatter = None):
        self.formatter = formatter or HtmlFormatter(nowrap=True)

    def has_language(self, name: str) -> bool:
        if not name:
            return False
        try:
            get_lexer_by_name(name)
        except ClassNotFound:
            return False
        return True

    def highlight(self, code: str, language: str) -> str:
        return pygments.highlight(code, get_lexer_by_name(language), self.formatter)

    def highlight_auto(self, code: str) -> str:
        try:
            lexer = guess_lexer(code)
        except ClassNotFound:
            lexer = TextLexer()
        return pygments.highlight(code, lexer, self.formatter)


def highlight_code(highlighter: Highlighter, code: str, language: str = None) -> str:
    """Highlight with the named language if known, else auto-detect.

    Any highlighter failure degrades to HTML-escaped source.
    """
    try:
        if language and highlighter.has_language(language):
            return highlighter.highlight(code, language)
        return highlighter.highlight_auto(code)
    except Exception as e:
        logger.warning(f"Highlighting failed for language {language!r}, emitting escaped source: {e}")
        return sanitize_html(code)


def make_markdown(preset: str = "commonmark", highlighter: Highlighter = None) -> MarkdownIt:
    """Build a MarkdownIt instance; fenced code is highlighted when a highlighter is given."""
    options = {"linkify": False}
    if highlighter is not None:
        options["highlight"] = lambda code, lang, attrs: highlight_code(highlighter, code, lang)
    return MarkdownIt(preset, options_update=options)
