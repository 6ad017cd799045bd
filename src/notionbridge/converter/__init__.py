"""Markdown ↔ Notion block conversion for the supported block subset.

Public API:

- :func:`markdown_to_blocks`: Markdown → Notion blocks.
- :func:`blocks_to_markdown`: Notion blocks → Markdown.
- :class:`ASTNormalizer`: parse and normalize Markdown to canonical AST.
- :func:`build_rich_text`: convert inline AST tokens to rich_text arrays.
- :func:`render_rich_text`: render rich_text arrays as Markdown.
"""

from notionbridge.converter.ast_normalizer import ASTNormalizer
from notionbridge.converter.inline_renderer import plain_text, render_rich_text
from notionbridge.converter.md_to_notion import markdown_to_blocks, normalize_language
from notionbridge.converter.notion_to_md import blocks_to_markdown
from notionbridge.converter.rich_text import build_rich_text, split_rich_text

__all__ = [
    "ASTNormalizer",
    "blocks_to_markdown",
    "build_rich_text",
    "markdown_to_blocks",
    "normalize_language",
    "plain_text",
    "render_rich_text",
    "split_rich_text",
]
