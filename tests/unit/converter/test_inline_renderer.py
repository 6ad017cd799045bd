"""Dedicated unit tests for inline_renderer.py.

Covers markdown_escape, annotation rendering, equation handling, link
wrapping and plain-text extraction.
"""

from notionbridge.converter.inline_renderer import (
    markdown_escape,
    plain_text,
    render_rich_text,
    segment_text,
)

# =========================================================================
# markdown_escape
# =========================================================================

class TestMarkdownEscape:
    def test_inline_escapes_special_chars(self):
        assert markdown_escape("*bold*") == r"\*bold\*"
        assert markdown_escape("_italic_") == r"\_italic\_"
        assert markdown_escape("[link](url)") == r"\[link\]\(url\)"

    def test_block_starters_escaped(self):
        assert markdown_escape("# not heading") == r"\# not heading"
        assert markdown_escape("1. item") == r"1\. item"

    def test_backslash(self):
        assert markdown_escape("a\\b") == "a\\\\b"

    def test_code_context_no_escaping(self):
        assert markdown_escape("*bold*", context="code") == "*bold*"

    def test_url_context_encodes_parens(self):
        assert markdown_escape("https://x.com/p(1)", context="url") == "https://x.com/p%281%29"

    def test_empty_string(self):
        assert markdown_escape("") == ""


# =========================================================================
# render_rich_text
# =========================================================================

def _seg(text, href=None, **annotations):
    seg = {"type": "text", "text": {"content": text}, "plain_text": text}
    if annotations:
        seg["annotations"] = annotations
    if href:
        seg["href"] = href
    return seg


class TestRenderRichText:
    def test_empty(self):
        assert render_rich_text([]) == ""

    def test_plain(self):
        assert render_rich_text([_seg("hello")]) == "hello"

    def test_bold_italic_nesting(self):
        assert render_rich_text([_seg("x", bold=True, italic=True)]) == "***x***"

    def test_strikethrough_and_underline(self):
        assert render_rich_text([_seg("x", strikethrough=True)]) == "~~x~~"
        assert render_rich_text([_seg("x", underline=True)]) == "<u>x</u>"

    def test_code_ignores_other_annotations(self):
        assert render_rich_text([_seg("a*b", code=True, bold=True)]) == "`a*b`"

    def test_code_with_backticks(self):
        assert render_rich_text([_seg("a`b", code=True)]) == "``a`b``"
        assert render_rich_text([_seg("`x", code=True)]) == "`` `x ``"

    def test_link(self):
        assert render_rich_text([_seg("site", href="https://x.com")]) == "[site](https://x.com)"

    def test_newline_becomes_hard_break(self):
        assert render_rich_text([_seg("a\nb")]) == "a\\\nb"

    def test_equation(self):
        seg = {"type": "equation", "equation": {"expression": "E=mc^2"}}
        assert render_rich_text([seg]) == "$E=mc^2$"

    def test_mention_falls_back_to_plain_text(self):
        seg = {"type": "mention", "mention": {}, "plain_text": "@Ada"}
        assert render_rich_text([seg]) == "@Ada"

    def test_empty_runs_skipped(self):
        assert render_rich_text([_seg(""), _seg("x")]) == "x"


class TestPlainText:
    def test_prefers_plain_text(self):
        assert segment_text({"plain_text": "a", "text": {"content": "b"}}) == "a"

    def test_falls_back_to_content(self):
        assert segment_text({"text": {"content": "b"}}) == "b"

    def test_concatenation(self):
        assert plain_text([_seg("a"), _seg("b")]) == "ab"
        assert plain_text([]) == ""
