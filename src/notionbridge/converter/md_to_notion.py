"""Markdown to Notion blocks.

:func:`markdown_to_blocks` runs a two-stage pipeline:

1. **Parse and normalize**: mistune parses Markdown into an AST and
   :class:`ASTNormalizer` maps token types to canonical names.
2. **Build**: each block token becomes a Notion block dict.

Only the subset notionbridge round-trips is built: level-2 headings,
paragraphs, list items (every item, ordered or not and at any depth,
becomes a top-level ``bulleted_list_item``), and fenced code.  Other
heading levels and block kinds are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from notionbridge.converter.ast_normalizer import ASTNormalizer
from notionbridge.converter.rich_text import build_rich_text, plain_rich_text, split_rich_text

# ---------------------------------------------------------------------------
# Notion code language mapping
# ---------------------------------------------------------------------------

_NOTION_LANGUAGES: frozenset[str] = frozenset({
    "abap", "arduino", "bash", "basic", "c", "clojure", "coffeescript",
    "c++", "c#", "css", "dart", "diff", "docker", "elixir", "elm",
    "erlang", "flow", "fortran", "f#", "gherkin", "glsl", "go", "graphql",
    "groovy", "haskell", "html", "java", "javascript", "json", "julia",
    "kotlin", "latex", "less", "lisp", "livescript", "lua", "makefile",
    "markdown", "markup", "matlab", "mermaid", "nix", "objective-c",
    "ocaml", "pascal", "perl", "php", "plain text", "powershell",
    "prolog", "protobuf", "python", "r", "reason", "ruby", "rust",
    "sass", "scala", "scheme", "scss", "shell", "sql", "swift",
    "typescript", "vb.net", "verilog", "vhdl", "visual basic",
    "webassembly", "xml", "yaml", "java/c/c++/c#",
})

_LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "sh": "shell",
    "zsh": "shell",
    "rb": "ruby",
    "rs": "rust",
    "yml": "yaml",
    "md": "markdown",
    "cs": "c#",
    "cpp": "c++",
    "objc": "objective-c",
    "dockerfile": "docker",
    "make": "makefile",
    "tex": "latex",
    "jsx": "javascript",
    "tsx": "typescript",
    "jsonc": "json",
    "csharp": "c#",
    "golang": "go",
    "kt": "kotlin",
    "ps1": "powershell",
    "text": "plain text",
    "txt": "plain text",
    "plaintext": "plain text",
}

PLAIN_TEXT_LANGUAGE = "plain text"


def normalize_language(info: str | None) -> str:
    """Map a code fence info string to a Notion-accepted language name."""
    if not info:
        return PLAIN_TEXT_LANGUAGE
    lang = info.strip().lower()
    lang = lang.split()[0] if lang else PLAIN_TEXT_LANGUAGE
    if lang in _NOTION_LANGUAGES:
        return lang
    if lang in _LANGUAGE_ALIASES:
        return _LANGUAGE_ALIASES[lang]
    # "python3" -> "python"
    stripped = re.sub(r"\d+$", "", lang)
    if stripped in _NOTION_LANGUAGES:
        return stripped
    return _LANGUAGE_ALIASES.get(stripped, PLAIN_TEXT_LANGUAGE)


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def text_block(block_type: str, rich_text: list[dict]) -> dict:
    """Wire shape of a rich-text carrying block."""
    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": rich_text},
    }


def _inline(children: list[dict]) -> list[dict]:
    return split_rich_text(build_rich_text(children))


def _build_heading(token: dict) -> list[dict]:
    if token.get("attrs", {}).get("level") != 2:
        return []
    rich_text = _inline(token.get("children", []))
    if not rich_text:
        return []
    return [text_block("heading_2", rich_text)]


def _build_paragraph(token: dict) -> list[dict]:
    rich_text = _inline(token.get("children", []))
    if not rich_text:
        return []
    return [text_block("paragraph", rich_text)]


def _build_list(token: dict) -> list[dict]:
    """Flatten a (possibly nested) list into bulleted list item blocks.

    An item's own paragraphs are joined into one block; nested lists
    follow it as further items.
    """
    blocks: list[dict] = []
    for item in token.get("children", []):
        rich_text: list[dict] = []
        nested: list[dict] = []
        for child in item.get("children", []):
            child_type = child.get("type")
            if child_type == "paragraph":
                if rich_text:
                    rich_text.append({"type": "text", "text": {"content": "\n"}})
                rich_text.extend(build_rich_text(child.get("children", [])))
            elif child_type == "list":
                nested.extend(_build_list(child))
        if rich_text:
            blocks.append(text_block("bulleted_list_item", split_rich_text(rich_text)))
        blocks.extend(nested)
    return blocks


def _build_code_block(token: dict) -> list[dict]:
    block = text_block("code", plain_rich_text(token.get("raw", "")))
    block["code"]["language"] = normalize_language(token.get("attrs", {}).get("info"))
    return [block]


_BLOCK_HANDLERS: dict[str, Callable[[dict], list[dict]]] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "list": _build_list,
    "block_code": _build_code_block,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

_normalizer = ASTNormalizer()


def markdown_to_blocks(markdown: str) -> list[dict]:
    """Convert Markdown text to Notion block payloads.

    Examples
    --------
    >>> blocks = markdown_to_blocks("## Hello\\n\\nWorld")
    >>> [b["type"] for b in blocks]
    ['heading_2', 'paragraph']
    """
    blocks: list[dict] = []
    for token in _normalizer.parse(markdown):
        handler = _BLOCK_HANDLERS.get(token.get("type", ""))
        if handler is not None:
            blocks.extend(handler(token))
    return blocks
