"""Build Notion rich_text arrays from normalized inline AST tokens.

A rich_text text segment looks like::

    {
        "type": "text",
        "text": {"content": "hello"},
        "annotations": {"bold": true, "italic": false, "strikethrough": false,
                        "underline": false, "code": false, "color": "default"}
    }

``annotations`` is only present when something deviates from the
defaults, and a linked run also carries ``"href"`` at the top level.
"""

from __future__ import annotations

from notionbridge.utils.text_split import split_string

RICH_TEXT_LIMIT = 2000
"""Maximum characters in one ``text.content`` value."""


def _default_annotations() -> dict:
    return {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": "default",
    }


def _merge_annotations(base: dict, **overrides: bool) -> dict:
    """OR-merge annotation flags into a copy of *base*."""
    merged = dict(base)
    for key, value in overrides.items():
        if key in merged:
            merged[key] = merged[key] or value
    return merged


_WRAPPER_ANNOTATIONS: dict[str, str] = {
    "strong": "bold",
    "emphasis": "italic",
    "strikethrough": "strikethrough",
}


def build_rich_text(
    children: list[dict],
    *,
    annotations: dict | None = None,
    href: str | None = None,
) -> list[dict]:
    """Convert inline AST tokens to a Notion rich_text array.

    Handles text, strong, emphasis, strikethrough, codespan, link, image
    (as ``alt`` text), softbreak (a space) and linebreak (a newline).
    Unknown inline types are skipped.
    """
    if annotations is None:
        annotations = _default_annotations()

    segments: list[dict] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type == "text":
            raw = token.get("raw", "")
            if raw:
                segments.append(_make_text_segment(raw, annotations, href))

        elif token_type in _WRAPPER_ANNOTATIONS:
            flag = _WRAPPER_ANNOTATIONS[token_type]
            segments.extend(build_rich_text(
                token.get("children", []),
                annotations=_merge_annotations(annotations, **{flag: True}),
                href=href,
            ))

        elif token_type == "codespan":
            segments.append(_make_text_segment(
                token.get("raw", ""),
                _merge_annotations(annotations, code=True),
                href,
            ))

        elif token_type == "link":
            link_url = token.get("attrs", {}).get("url", "")
            segments.extend(build_rich_text(
                token.get("children", []),
                annotations=annotations,
                href=link_url or href,
            ))

        elif token_type == "image":
            alt = extract_text(token.get("children", []))
            if alt:
                segments.append(_make_text_segment(alt, annotations, href))

        elif token_type == "softbreak":
            segments.append(_make_text_segment(" ", annotations, href))

        elif token_type == "linebreak":
            segments.append(_make_text_segment("\n", annotations, href))

    return _merge_adjacent(segments)


def split_rich_text(segments: list[dict], limit: int = RICH_TEXT_LIMIT) -> list[dict]:
    """Split any segment whose content exceeds *limit* characters.

    Annotations and links are copied onto every piece.
    """
    output: list[dict] = []

    for segment in segments:
        if segment.get("type", "text") != "text":
            output.append(segment)
            continue

        content = segment.get("text", {}).get("content", "")
        if len(content) <= limit:
            output.append(segment)
            continue

        for chunk in split_string(content, limit):
            output.append(_clone_text_segment(segment, chunk))

    return output


def plain_rich_text(content: str) -> list[dict]:
    """A rich_text array holding *content* as unannotated text runs."""
    if not content:
        return []
    return split_rich_text([{"type": "text", "text": {"content": content}}])


def extract_text(children: list[dict]) -> str:
    """Recursively extract plain text from inline tokens."""
    parts: list[str] = []
    for token in children:
        if token.get("type") == "text":
            parts.append(token.get("raw", ""))
        elif "children" in token:
            parts.append(extract_text(token["children"]))
        elif "raw" in token:
            parts.append(token["raw"])
    return "".join(parts)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _make_text_segment(
    content: str,
    annotations: dict,
    href: str | None = None,
) -> dict:
    seg: dict = {
        "type": "text",
        "text": {"content": content},
    }
    if _has_non_default_annotations(annotations):
        seg["annotations"] = dict(annotations)
    if href:
        seg["href"] = href
    return seg


def _has_non_default_annotations(annotations: dict) -> bool:
    return (
        annotations.get("bold", False)
        or annotations.get("italic", False)
        or annotations.get("strikethrough", False)
        or annotations.get("underline", False)
        or annotations.get("code", False)
        or annotations.get("color", "default") != "default"
    )


def _clone_text_segment(segment: dict, new_content: str) -> dict:
    new_seg: dict = {
        "type": "text",
        "text": {"content": new_content},
    }
    if "annotations" in segment:
        new_seg["annotations"] = dict(segment["annotations"])
    if "href" in segment:
        new_seg["href"] = segment["href"]
    return new_seg


def _merge_adjacent(segments: list[dict]) -> list[dict]:
    """Join neighbouring text runs that share annotations and link.

    mistune splits text at escapes and entities; Notion does not care, and
    fewer runs keep the rendered Markdown free of empty delimiter pairs.
    """
    merged: list[dict] = []
    for seg in segments:
        if merged:
            prev = merged[-1]
            if (
                prev.get("annotations") == seg.get("annotations")
                and prev.get("href") == seg.get("href")
            ):
                prev["text"]["content"] += seg["text"]["content"]
                continue
        merged.append(seg)
    return merged
