"""Shared fixtures for core unit tests: stub rendering capabilities"""

import pytest

from blockdoc.core.render.html import HtmlRenderer


class StubHighlighter:
    """Knows only 'python'; output is tagged so tests can see which path ran."""

    def has_language(self, name: str) -> bool:
        return name == "python"

    def highlight(self, code: str, language: str) -> str:
        return f"<hl:{language}>{code}"

    def highlight_auto(self, code: str) -> str:
        return f"<auto>{code}"


class FailingHighlighter(StubHighlighter):
    def highlight(self, code: str, language: str) -> str:
        raise RuntimeError("lexer exploded")

    def highlight_auto(self, code: str) -> str:
        raise RuntimeError("lexer exploded")


def stub_to_html(markdown: str) -> str:
    return f"<p>{markdown}</p>"


@pytest.fixture(name="html_renderer")
def html_renderer_fixture():
    return HtmlRenderer(to_html=stub_to_html, highlighter=StubHighlighter())


@pytest.fixture(name="failing_renderer")
def failing_renderer_fixture():
    return HtmlRenderer(to_html=stub_to_html, highlighter=FailingHighlighter())


@pytest.fixture(name="safe_renderer")
def safe_renderer_fixture():
    return HtmlRenderer(to_html=stub_to_html, highlighter=StubHighlighter(), safe_urls=True)
