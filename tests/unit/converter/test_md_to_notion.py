"""Tests for markdown_to_blocks end-to-end."""

import pytest

from notionbridge.converter import markdown_to_blocks, normalize_language


def _text(block):
    """Concatenated text content of a block's rich_text."""
    return "".join(seg["text"]["content"] for seg in block[block["type"]]["rich_text"])


def _types(blocks):
    return [b["type"] for b in blocks]


# =========================================================================
# Block mapping
# =========================================================================

class TestHeadings:
    def test_h2_to_heading_2(self):
        blocks = markdown_to_blocks("## World")
        assert _types(blocks) == ["heading_2"]
        assert _text(blocks[0]) == "World"

    @pytest.mark.parametrize("md", ["# Title", "### Sub", "#### Deep"])
    def test_other_levels_dropped(self, md):
        assert markdown_to_blocks(md) == []

    def test_block_shape(self):
        block = markdown_to_blocks("## Hi")[0]
        assert block == {
            "object": "block",
            "type": "heading_2",
            "heading_2": {"rich_text": [{"type": "text", "text": {"content": "Hi"}}]},
        }


class TestParagraphs:
    def test_paragraphs_in_order(self):
        blocks = markdown_to_blocks("## Hello\n\nFirst\n\nSecond")
        assert _types(blocks) == ["heading_2", "paragraph", "paragraph"]
        assert [_text(b) for b in blocks] == ["Hello", "First", "Second"]

    def test_soft_break_becomes_space(self):
        assert _text(markdown_to_blocks("one\ntwo")[0]) == "one two"

    def test_hard_break_becomes_newline(self):
        assert _text(markdown_to_blocks("one  \ntwo")[0]) == "one\ntwo"

    def test_long_paragraph_split_into_runs(self):
        blocks = markdown_to_blocks("a" * 4500)
        runs = blocks[0]["paragraph"]["rich_text"]
        assert [len(r["text"]["content"]) for r in runs] == [2000, 2000, 500]

    def test_empty_input(self):
        assert markdown_to_blocks("") == []


class TestLists:
    def test_bullets(self):
        blocks = markdown_to_blocks("- a\n- b")
        assert _types(blocks) == ["bulleted_list_item", "bulleted_list_item"]
        assert [_text(b) for b in blocks] == ["a", "b"]

    def test_ordered_list_becomes_bullets(self):
        blocks = markdown_to_blocks("1. one\n2. two")
        assert _types(blocks) == ["bulleted_list_item", "bulleted_list_item"]

    def test_nested_items_flattened_in_order(self):
        blocks = markdown_to_blocks("- a\n- b\n  - c\n- d")
        assert [_text(b) for b in blocks] == ["a", "b", "c", "d"]
        assert set(_types(blocks)) == {"bulleted_list_item"}


class TestCode:
    def test_fenced_code_with_alias(self):
        block = markdown_to_blocks("```py\nprint(1)\n```")[0]
        assert block["type"] == "code"
        assert block["code"]["language"] == "python"
        assert _text(block) == "print(1)"

    def test_fence_without_language(self):
        block = markdown_to_blocks("```\nx = 1\n```")[0]
        assert block["code"]["language"] == "plain text"

    def test_code_not_parsed_as_markdown(self):
        block = markdown_to_blocks("```\n## not a heading\n- nor a list\n```")[0]
        assert _text(block) == "## not a heading\n- nor a list"


class TestUnsupported:
    def test_block_quote_dropped(self):
        assert markdown_to_blocks("> quoted") == []

    def test_surrounding_content_kept(self):
        blocks = markdown_to_blocks("before\n\n> quoted\n\nafter")
        assert [_text(b) for b in blocks] == ["before", "after"]


# =========================================================================
# Inline annotations
# =========================================================================

class TestInline:
    def test_bold_and_italic(self):
        runs = markdown_to_blocks("**bold** and *it*")[0]["paragraph"]["rich_text"]
        assert [r["text"]["content"] for r in runs] == ["bold", " and ", "it"]
        assert runs[0]["annotations"]["bold"] is True
        assert "annotations" not in runs[1]
        assert runs[2]["annotations"]["italic"] is True

    def test_strikethrough(self):
        run = markdown_to_blocks("~~gone~~")[0]["paragraph"]["rich_text"][0]
        assert run["annotations"]["strikethrough"] is True

    def test_inline_code(self):
        run = markdown_to_blocks("`x`")[0]["paragraph"]["rich_text"][0]
        assert run["text"]["content"] == "x"
        assert run["annotations"]["code"] is True

    def test_link_sets_href(self):
        run = markdown_to_blocks("[site](https://example.com)")[0]["paragraph"]["rich_text"][0]
        assert run["text"]["content"] == "site"
        assert run["href"] == "https://example.com"

    def test_image_kept_as_alt_text(self):
        assert _text(markdown_to_blocks("![diagram](d.png)")[0]) == "diagram"


# =========================================================================
# Language mapping
# =========================================================================

class TestNormalizeLanguage:
    @pytest.mark.parametrize(
        ("info", "expected"),
        [
            (None, "plain text"),
            ("", "plain text"),
            ("python", "python"),
            ("Python", "python"),
            ("py", "python"),
            ("python3", "python"),
            ("ts", "typescript"),
            ("c++", "c++"),
            ("js title=app.js", "javascript"),
            ("brainfudge", "plain text"),
        ],
    )
    def test_mapping(self, info, expected):
        assert normalize_language(info) == expected
