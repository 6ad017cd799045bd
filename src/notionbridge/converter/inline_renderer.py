"""Inline rendering: Notion rich_text arrays to Markdown strings.

Converts rich_text runs into Markdown, applying annotations (code, bold,
italic, strikethrough, underline), links and inline equations.  Text is
escaped so that rendering and re-parsing yields the same runs again.
"""

from __future__ import annotations

import re

# Characters escaped in inline Markdown context.  Besides emphasis and
# link syntax this covers block starters (``#``, ``>``, ``-``, ``+``,
# ordered-list ``.``/``)``), raw HTML (``<``) and entities (``&``).
_ESCAPE_RE = re.compile(r'([\\`*_{}\[\]()#+\-.!|<>&~])')


def markdown_escape(text: str, context: str = "inline") -> str:
    """Escape special Markdown characters.

    Parameters
    ----------
    text:
        The raw text to escape.
    context:
        One of ``"inline"``, ``"code"``, or ``"url"``.

        * ``"inline"`` -- escape all special Markdown characters.
        * ``"code"`` -- no escaping (content is inside a code span/block).
        * ``"url"`` -- only percent-encode parentheses so links parse.
    """
    if context == "code":
        return text
    if context == "url":
        return text.replace("(", "%28").replace(")", "%29")
    return _ESCAPE_RE.sub(r'\\\1', text)


def _code_span(raw: str) -> str:
    """Wrap *raw* in enough backticks that its own backticks stay literal."""
    longest = max((len(run) for run in re.findall(r"`+", raw)), default=0)
    fence = "`" * (longest + 1)
    if raw.startswith("`") or raw.endswith("`"):
        raw = f" {raw} "
    return f"{fence}{raw}{fence}"


def segment_text(seg: dict) -> str:
    """Plain text of one rich_text run.

    API responses carry ``plain_text``; locally built runs only have
    ``text.content``.
    """
    return seg.get("plain_text") or seg.get("text", {}).get("content", "")


def plain_text(segments: list[dict]) -> str:
    """Concatenate the unformatted text of *segments*."""
    return "".join(segment_text(seg) for seg in segments or [])


def render_rich_text(segments: list[dict]) -> str:
    """Render a Notion rich_text array to a Markdown string.

    Annotation combination order (innermost first)::

        code -> bold -> italic -> strikethrough -> underline -> link

    Newlines inside non-code runs become backslash hard breaks.
    Equation runs render as ``$expression$``; mentions and other run types
    fall back to their ``plain_text``.
    """
    if not segments:
        return ""

    parts: list[str] = []

    for seg in segments:
        seg_type = seg.get("type", "text")
        annotations = seg.get("annotations") or {}
        href = seg.get("href")

        if seg_type == "equation":
            expression = seg.get("equation", {}).get("expression", "")
            text = f"${expression}$"
            if href:
                text = f"[{text}]({markdown_escape(href, 'url')})"
            parts.append(text)
            continue

        raw = segment_text(seg)
        if not raw:
            continue

        is_code = annotations.get("code", False)

        if is_code:
            text = _code_span(raw)
        else:
            text = markdown_escape(raw).replace("\n", "\\\n")

        if annotations.get("bold", False) and not is_code:
            text = f"**{text}**"

        if annotations.get("italic", False) and not is_code:
            text = f"*{text}*"

        if annotations.get("strikethrough", False) and not is_code:
            text = f"~~{text}~~"

        if annotations.get("underline", False) and not is_code:
            text = f"<u>{text}</u>"

        if href:
            text = f"[{text}]({markdown_escape(href, 'url')})"

        parts.append(text)

    return "".join(parts)
