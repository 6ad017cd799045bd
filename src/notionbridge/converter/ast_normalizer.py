"""Parse Markdown and normalize it to canonical AST tokens.

This module wraps mistune v3's AST renderer and reduces the raw token
stream to the handful of types the block builder understands.

Canonical block tokens:
    heading, paragraph, list, list_item, block_code

Canonical inline tokens:
    text, strong, emphasis, codespan, strikethrough, link, image,
    softbreak, linebreak

Everything else (tables, block quotes, thematic breaks, raw HTML) is
dropped here rather than carried through to the builder.
"""

from __future__ import annotations

import mistune

# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_BLOCK_TYPE_MAP: dict[str, str] = {
    "heading": "heading",
    "paragraph": "paragraph",
    "list": "list",
    "list_item": "list_item",
    "task_list_item": "list_item",
    "block_code": "block_code",
    # Tight list items wrap their inline content in block_text.
    "block_text": "paragraph",
}

_INLINE_TYPE_MAP: dict[str, str] = {
    "text": "text",
    "strong": "strong",
    "emphasis": "emphasis",
    "codespan": "codespan",
    "strikethrough": "strikethrough",
    "link": "link",
    "image": "image",
    "softbreak": "softbreak",
    "linebreak": "linebreak",
}


class ASTNormalizer:
    """Parse Markdown and normalize to canonical AST tokens."""

    def __init__(self) -> None:
        self._parser = mistune.create_markdown(
            renderer="ast",
            plugins=["strikethrough", "url", "task_lists"],
        )

    def parse(self, markdown: str) -> list[dict]:
        """Parse markdown and return the normalized token list."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_tokens(raw_tokens)

    def _normalize_tokens(self, tokens: list[dict]) -> list[dict]:
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _normalize_token(self, token: dict) -> dict | None:
        """Normalize a single token, returning None if it should be dropped."""
        raw_type = token.get("type", "")

        if raw_type in _BLOCK_TYPE_MAP:
            return self._normalize_block(token, _BLOCK_TYPE_MAP[raw_type])

        if raw_type in _INLINE_TYPE_MAP:
            return self._normalize_inline(token, _INLINE_TYPE_MAP[raw_type])

        # mistune uses "raw" children inside some inline containers.
        if raw_type == "raw":
            return {"type": "text", "raw": token.get("raw", "")}

        return None

    def _normalize_block(self, token: dict, canonical_type: str) -> dict:
        result: dict = {"type": canonical_type}

        attrs = token.get("attrs")
        if attrs:
            result["attrs"] = dict(attrs)

        if canonical_type == "block_code":
            raw_code = token.get("raw", "")
            # mistune keeps the newline before the closing fence.
            if raw_code.endswith("\n"):
                raw_code = raw_code[:-1]
            result["raw"] = raw_code
            return result

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result

    def _normalize_inline(self, token: dict, canonical_type: str) -> dict:
        result: dict = {"type": canonical_type}

        if canonical_type in ("text", "softbreak", "linebreak", "codespan"):
            if "raw" in token:
                result["raw"] = token["raw"]
            return result

        attrs = token.get("attrs")
        if attrs:
            result["attrs"] = dict(attrs)

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result
