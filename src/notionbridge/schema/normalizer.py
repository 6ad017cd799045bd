"""Reduce a raw Notion database object to a :class:`NormalizedSchema`."""

from __future__ import annotations

from typing import Any

from notionbridge.models import NormalizedSchema, SchemaProperty
from notionbridge.utils.hashing import hash_pairs


def _plain_title(title: list[dict[str, Any]] | None) -> str:
    return "".join(
        seg.get("plain_text") or seg.get("text", {}).get("content", "")
        for seg in title or []
    )


def normalize_database(database: dict[str, Any]) -> NormalizedSchema:
    """Normalize a database object as returned by ``GET /databases/{id}``.

    Properties keep the order in which Notion lists them.  A property
    without a ``type`` is recorded as ``"unknown"``.  The title property is
    the first one typed ``"title"`` (``None`` if there is none).
    """
    properties = tuple(
        SchemaProperty(
            name=name,
            type=(value or {}).get("type") or "unknown",
            config=dict(value or {}),
        )
        for name, value in (database.get("properties") or {}).items()
    )
    title_prop = next((p for p in properties if p.type == "title"), None)
    return NormalizedSchema(
        collection_id=database.get("id", ""),
        title_property_name=title_prop.name if title_prop else None,
        properties=properties,
        last_modified_at=database.get("last_edited_time", ""),
        properties_hash=hash_pairs((p.name, p.type) for p in properties),
        title=_plain_title(database.get("title")),
    )
