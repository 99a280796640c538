"""Unit tests for core/document.py"""

import json

import pytest

from blockdoc.core.block import Block, HeadingBlock
from blockdoc.core.document import Document
from blockdoc.errors import (
    BlockNotFoundError, DuplicateIdError, InvalidPositionError, InvalidTypeError,
    MissingArticleError, MissingIdError, MissingRequiredFieldError, ValidationError,
)


@pytest.fixture(name="doc")
def doc_fixture(article_data):
    """A Document built from the canonical article."""
    return Document(article_data["title"], article_data["metadata"], article_data["blocks"])


def _ids(doc: Document) -> list[str]:
    return [b["id"] for b in doc.article.blocks]


# --- construction ---

def test_new_document_is_empty():
    """A bare Document has a title, empty metadata, and no blocks."""
    doc = Document("Title")
    assert doc.article.title == "Title"
    assert doc.article.metadata == {}
    assert doc.article.blocks == []


def test_initial_blocks_are_constructed(doc):
    """Blocks passed to the constructor are stored as plain dicts in order."""
    assert _ids(doc) == ["intro", "body", "steps", "snippet", "rule"]
    assert all(isinstance(b, dict) for b in doc.article.blocks)


def test_initial_duplicate_ids_raise():
    """Duplicate ids among initial blocks fail like add_block would."""
    with pytest.raises(DuplicateIdError, match='Block with ID "a" already exists'):
        Document("T", blocks=[Block.text("a", "x"), Block.text("a", "y")])


def test_initial_invalid_block_raises():
    """An unconstructible initial block fails the Document."""
    with pytest.raises(MissingRequiredFieldError):
        Document("T", blocks=[{"id": "h", "type": "heading", "content": "x"}])


# --- add / insert ---

def test_add_block_appends_and_returns_block(doc):
    """add_block returns the constructed Block and stores its projection last."""
    block = doc.add_block({"id": "new", "type": "text", "content": "hello"})
    assert isinstance(block, Block)
    assert _ids(doc)[-1] == "new"
    assert doc.get_block("new") == block.to_dict()


def test_add_block_accepts_block_instance(doc):
    """A Block can be added directly."""
    doc.add_block(Block.heading("h2", 3, "Next"))
    assert doc.get_block("h2")["level"] == 3


def test_add_block_duplicate_leaves_document_unchanged(doc):
    """A duplicate id raises and does not modify the block list."""
    before = list(doc.article.blocks)
    with pytest.raises(DuplicateIdError):
        doc.add_block({"id": "body", "type": "text", "content": "again"})
    assert doc.article.blocks == before


@pytest.mark.parametrize("data,error", [
    ({"type": "text"}, MissingIdError),
    ({"id": "x", "type": "video"}, InvalidTypeError),
    ({"id": "x", "type": "code", "content": "y"}, MissingRequiredFieldError),
])
def test_add_block_construction_errors(doc, data, error):
    """Construction errors propagate from add_block."""
    with pytest.raises(error):
        doc.add_block(data)
    assert len(doc.article.blocks) == 5


def test_returned_block_is_detached(doc):
    """Mutating the returned Block does not change the stored copy."""
    block = doc.add_block(Block.text("t", "original"))
    block.update({"content": "changed"})
    assert doc.get_block("t")["content"] == "original"


@pytest.mark.parametrize("position,expected", [
    (0, ["new", "intro", "body", "steps", "snippet", "rule"]),
    (2, ["intro", "body", "new", "steps", "snippet", "rule"]),
    (5, ["intro", "body", "steps", "snippet", "rule", "new"]),
    (99, ["intro", "body", "steps", "snippet", "rule", "new"]),
    (-1, ["intro", "body", "steps", "snippet", "new", "rule"]),
])
def test_insert_block_positions(doc, position, expected):
    """insert_block follows list.insert semantics, including out-of-range positions."""
    doc.insert_block({"id": "new", "type": "divider"}, position)
    assert _ids(doc) == expected


def test_insert_block_duplicate_raises(doc):
    """insert_block rejects an id already in the document."""
    with pytest.raises(DuplicateIdError):
        doc.insert_block({"id": "intro", "type": "divider"}, 0)


# --- get ---

def test_get_block_missing_returns_none(doc):
    """Unknown ids return None rather than raising."""
    assert doc.get_block("nope") is None


# --- update ---

def test_update_block_merges_and_revalidates(doc):
    """update_block merges fields over the stored block and returns the new projection."""
    result = doc.update_block("intro", {"content": "Overview", "level": 3})
    assert result == {"id": "intro", "type": "heading", "content": "Overview", "level": 3}
    assert doc.get_block("intro") == result


def test_update_block_keeps_extras(doc):
    """Custom keys added by an update survive in the stored block."""
    doc.update_block("body", {"align": "center"})
    assert doc.get_block("body")["align"] == "center"
    assert doc.get_block("body")["content"] == "Some **bold** text."


def test_update_block_can_change_type(doc):
    """A merged type change is re-checked for the new kind's required fields."""
    with pytest.raises(MissingRequiredFieldError):
        doc.update_block("body", {"type": "image"})
    result = doc.update_block("body", {"type": "quote", "attribution": "Me"})
    assert result["type"] == "quote"


def test_update_block_unknown_id_raises(doc):
    """Updating a missing block raises BlockNotFoundError."""
    with pytest.raises(BlockNotFoundError, match='Block with ID "ghost" not found'):
        doc.update_block("ghost", {"content": "x"})


def test_update_block_rename(doc):
    """An update may change the id when the new id is free."""
    doc.update_block("rule", {"id": "separator"})
    assert doc.get_block("rule") is None
    assert doc.get_block("separator")["type"] == "divider"


def test_update_block_rename_onto_existing_id_raises(doc):
    """Renaming onto another block's id is refused and nothing changes."""
    with pytest.raises(DuplicateIdError):
        doc.update_block("rule", {"id": "intro"})
    assert _ids(doc) == ["intro", "body", "steps", "snippet", "rule"]


def test_update_block_invalid_merge_leaves_block_unchanged(doc):
    """A failing re-validation keeps the stored block as it was."""
    before = dict(doc.get_block("snippet"))
    with pytest.raises(InvalidTypeError):
        doc.update_block("snippet", {"type": "video"})
    assert doc.get_block("snippet") == before


# --- remove ---

def test_remove_block(doc):
    """remove_block deletes the block and reports True."""
    assert doc.remove_block("body") is True
    assert _ids(doc) == ["intro", "steps", "snippet", "rule"]


def test_remove_block_missing_returns_false(doc):
    """Removing an unknown id is a no-op returning False."""
    assert doc.remove_block("nope") is False
    assert len(doc.article.blocks) == 5


# --- move ---

@pytest.mark.parametrize("block_id,position,expected", [
    ("intro", 4, ["body", "steps", "snippet", "rule", "intro"]),
    ("rule", 0, ["rule", "intro", "body", "steps", "snippet"]),
    ("steps", 1, ["intro", "steps", "body", "snippet", "rule"]),
    ("body", 1, ["intro", "body", "steps", "snippet", "rule"]),
])
def test_move_block(doc, block_id, position, expected):
    """move_block places the block at position; the rest keep their relative order."""
    assert doc.move_block(block_id, position) is True
    assert _ids(doc) == expected


@pytest.mark.parametrize("position", [-1, 5, 100])
def test_move_block_out_of_range_raises(doc, position):
    """Positions outside [0, len-1] raise InvalidPositionError."""
    with pytest.raises(InvalidPositionError, match=f"Invalid position: {position}"):
        doc.move_block("intro", position)
    assert _ids(doc) == ["intro", "body", "steps", "snippet", "rule"]


def test_move_block_missing_returns_false(doc):
    """Moving an unknown id returns False before checking the position."""
    assert doc.move_block("nope", 100) is False


# --- validation ---

def test_validate_valid_document(doc):
    """A well-formed document validates to True."""
    assert doc.validate() is True


def test_validate_reports_schema_violation():
    """Construction-valid but schema-invalid content fails validate()."""
    doc = Document("T", blocks=[{"id": "h", "type": "heading", "level": 9, "content": "x"}])
    with pytest.raises(ValidationError) as exc:
        doc.validate()
    assert any(e["path"].endswith("level") for e in exc.value.errors)


def test_validate_bad_id_pattern():
    """Ids with characters outside [A-Za-z0-9_-] fail validation."""
    doc = Document("T", blocks=[Block.text("has space", "x")])
    with pytest.raises(ValidationError):
        doc.validate()


# --- serialization ---

def test_to_dict_shape(doc, article_data):
    """to_dict wraps the article under an 'article' key."""
    data = doc.to_dict()
    assert set(data) == {"article"}
    assert data["article"]["title"] == article_data["title"]
    assert data["article"]["metadata"] == article_data["metadata"]
    assert data["article"]["blocks"][0] == {"id": "intro", "type": "heading", "content": "Introduction", "level": 2}


def test_to_json_is_indented_json(doc):
    """to_json produces parseable JSON with two-space indentation by default."""
    text = doc.to_json()
    assert json.loads(text) == doc.to_dict()
    assert '\n  "article": {' in text


def test_to_json_uses_configured_indent(doc, tmp_path, monkeypatch):
    """Without an explicit indent, to_json and str() follow json_indent from config."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("json_indent: 4\n")
    assert '\n    "article": {' in doc.to_json()
    assert str(doc) == doc.to_json()
    monkeypatch.setenv("BLOCKDOC_JSON_INDENT", "0")
    assert doc.to_json().startswith('{\n"article": {')


def test_to_json_explicit_indent_wins(doc, tmp_path, monkeypatch):
    """An indent argument overrides the configured json_indent."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("json_indent: 4\n")
    assert '\n  "article": {' in doc.to_json(indent=2)


def test_to_json_keeps_unicode():
    """Non-ASCII characters are written as-is."""
    doc = Document("Café", blocks=[Block.text("t", "naïve")])
    assert "Café" in doc.to_json()
    assert "naïve" in doc.to_json()


def test_str_is_json(doc):
    """str() of a Document is its JSON form."""
    assert str(doc) == doc.to_json()


def test_from_json_round_trip(doc):
    """from_json(to_json()) reproduces the same document."""
    restored = Document.from_json(doc.to_json())
    assert restored.to_dict() == doc.to_dict()


def test_from_json_accepts_mapping_and_bytes(doc):
    """from_json takes a mapping or encoded bytes as well as str."""
    assert Document.from_json(doc.to_dict()).to_dict() == doc.to_dict()
    assert Document.from_json(doc.to_json().encode()).to_dict() == doc.to_dict()


def test_from_json_defaults():
    """Missing title, metadata, and blocks become empty values."""
    doc = Document.from_json('{"article": {}}')
    assert doc.article.title == ""
    assert doc.article.metadata == {}
    assert doc.article.blocks == []


@pytest.mark.parametrize("text", ['{}', '{"article": null}', '{"article": []}', '[]'])
def test_from_json_missing_article_raises(text):
    """Input without an article object raises MissingArticleError."""
    with pytest.raises(MissingArticleError, match="missing article property"):
        Document.from_json(text)


def test_from_json_invalid_json_raises():
    """Malformed JSON surfaces as a ValueError."""
    with pytest.raises(ValueError):
        Document.from_json("{not json")


def test_from_json_reconstructs_blocks():
    """Blocks in the input go through construction checks."""
    text = json.dumps({"article": {"title": "T", "blocks": [{"id": "c", "type": "code", "content": "x"}]}})
    with pytest.raises(MissingRequiredFieldError):
        Document.from_json(text)


def test_from_json_heading_block_type(doc):
    """Restored blocks are plain dicts that rebuild to the right Block kind."""
    restored = Document.from_json(doc.to_json())
    assert isinstance(Block.from_dict(restored.get_block("intro")), HeadingBlock)


# --- rendering delegation ---

def test_render_to_markdown_delegates(doc):
    """render_to_markdown starts with the title heading."""
    assert doc.render_to_markdown().startswith("# Getting Started\n\n")


def test_render_to_html_uses_given_renderer(doc, html_renderer):
    """render_to_html renders through the renderer passed in."""
    html = doc.render_to_html(html_renderer)
    assert html.startswith('<article class="blockdoc-article">')
    assert "<p>Some **bold** text.</p>" in html


def test_render_to_html_default_follows_config(tmp_path, monkeypatch):
    """The default renderer is rebuilt from config on each call."""
    monkeypatch.chdir(tmp_path)
    doc = Document("T", blocks=[Block.image("i", "javascript:alert(1)", "x")])
    assert 'src="javascript:alert(1)"' in doc.render_to_html()
    (tmp_path / "config.yaml").write_text("safe_urls: true\n")
    assert 'src=""' in doc.render_to_html()
    monkeypatch.setenv("BLOCKDOC_SAFE_URLS", "false")
    assert 'src="javascript:alert(1)"' in doc.render_to_html()
