"""Registry of entity adapters by kind and name.

Each kind may register a ``"default"`` adapter that :func:`get_adapter`
falls back to when the requested name is unknown.  To add an adapter,
register an instance under its kind below.
"""

from __future__ import annotations

from typing import Literal

from notionbridge.adapters.base import EntityAdapter
from notionbridge.adapters.blog import BlogArticleAdapter

Kind = Literal["articles", "changelog", "projects"]

KINDS: tuple[str, ...] = ("articles", "changelog", "projects")

_blog = BlogArticleAdapter()

ADAPTERS: dict[str, dict[str, EntityAdapter]] = {
    "articles": {
        "blog": _blog,
        "default": _blog,
    },
    "changelog": {},
    "projects": {},
}


def get_adapter(kind: str, name: str | None = None) -> EntityAdapter | None:
    """Return the adapter registered as *name*, else the kind's default."""
    adapters = ADAPTERS.get(kind)
    if not adapters:
        return None
    if name and name in adapters:
        return adapters[name]
    return adapters.get("default")


def has_adapter(kind: str, name: str | None = None) -> bool:
    return get_adapter(kind, name) is not None


def list_adapters(kind: str) -> list[str]:
    """Registered adapter names for *kind*, excluding ``"default"``."""
    return [name for name in ADAPTERS.get(kind, {}) if name != "default"]
