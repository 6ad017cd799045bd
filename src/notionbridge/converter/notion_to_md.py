"""Notion blocks to Markdown.

Renders the block kinds notionbridge understands and silently skips the
rest, so content types added to Notion later never break a read::

    paragraph           -> text
    heading_2           -> ## text
    bulleted_list_item  -> * text
    code                -> fenced block with language tag

Fragments are joined with a blank line; empty fragments are dropped.
"""

from __future__ import annotations

from collections.abc import Callable

from .inline_renderer import plain_text, render_rich_text
from .md_to_notion import PLAIN_TEXT_LANGUAGE


def _rich_text_of(block: dict) -> list[dict]:
    data = block.get(block.get("type", ""), {}) or {}
    return data.get("rich_text", []) or []


def _render_paragraph(block: dict) -> str:
    return render_rich_text(_rich_text_of(block))


def _render_heading_2(block: dict) -> str:
    # A heading cannot span lines.
    segments = [
        {**seg, "plain_text": plain_text([seg]).replace("\n", " ")}
        for seg in _rich_text_of(block)
    ]
    text = render_rich_text(segments)
    return f"## {text}" if text else ""


def _render_bulleted_list_item(block: dict) -> str:
    text = render_rich_text(_rich_text_of(block))
    return f"* {text}" if text else ""


def _render_code(block: dict) -> str:
    data = block.get("code", {}) or {}
    language = data.get("language") or ""
    if language == PLAIN_TEXT_LANGUAGE:
        language = ""
    code_text = plain_text(data.get("rich_text", []))
    fence = "```"
    while fence in code_text:
        fence += "`"
    return f"{fence}{language}\n{code_text}\n{fence}"


_RENDERERS: dict[str, Callable[[dict], str]] = {
    "paragraph": _render_paragraph,
    "heading_2": _render_heading_2,
    "bulleted_list_item": _render_bulleted_list_item,
    "code": _render_code,
}


def render_block(block: dict) -> str:
    """Render one block, or ``""`` when its kind is not supported."""
    renderer = _RENDERERS.get(block.get("type", ""))
    return renderer(block) if renderer is not None else ""


def blocks_to_markdown(blocks: list[dict]) -> str:
    """Render a list of Notion blocks to a Markdown string.

    Examples
    --------
    >>> blocks_to_markdown([
    ...     {"type": "heading_2", "heading_2": {"rich_text": [{"plain_text": "Hi"}]}},
    ...     {"type": "divider", "divider": {}},
    ... ])
    '## Hi'
    """
    fragments = (render_block(block) for block in blocks)
    return "\n\n".join(fragment for fragment in fragments if fragment)
