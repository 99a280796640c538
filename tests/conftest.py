"""Root test configuration: shared document data and loguru isolation"""

import copy
import sys

import pytest
from loguru import logger

from blockdoc.config import ENV_PREFIX, Settings


CANONICAL_ARTICLE = {
    "title": "Getting Started",
    "metadata": {
        "author": "Ada Lovelace",
        "publishedDate": "2023-09-22T12:00:00Z",
        "tags": ["intro", "guide"],
    },
    "blocks": [
        {"id": "intro", "type": "heading", "level": 2, "content": "Introduction"},
        {"id": "body", "type": "text", "content": "Some **bold** text."},
        {"id": "steps", "type": "list", "content": "", "items": ["Install", "Run"], "listType": "ordered"},
        {"id": "snippet", "type": "code", "language": "python", "content": "print('hi')"},
        {"id": "rule", "type": "divider", "content": ""},
    ],
}


@pytest.fixture(name="article_data")
def article_data_fixture():
    """A fresh copy of the canonical article mapping."""
    return copy.deepcopy(CANONICAL_ARTICLE)


@pytest.fixture(name="log_messages")
def log_messages_fixture():
    """Collect loguru WARNING+ messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass  # already removed by configure_logging


@pytest.fixture(autouse=True)
def clear_blockdoc_env(monkeypatch):
    """Keep BLOCKDOC_ env vars from the calling shell out of every test."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{name.upper()}", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore a plain stderr sink after each test (CLI runs replace all sinks)."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
