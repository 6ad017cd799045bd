"""Adapter for blog article databases."""

from __future__ import annotations

import datetime as dt
from typing import Any

from notionbridge.adapters.base import EntityAdapter
from notionbridge.adapters.codecs import (
    DateFromNotionDate,
    MultiSelectFromMultiSelect,
    PlainTextFromRichText,
    PlainTextFromTitle,
    SelectFromSelect,
)
from notionbridge.adapters.config import AdapterConfig, make_config_from_annotations
from notionbridge.models import ListParams

BLOG_PROPERTIES: dict[str, str] = {
    "name": "Title",                    # title
    "description": "Description",       # rich_text
    "type": "Content Type",             # select
    "tags": "Tags",                     # multi_select
    "status": "Status",                 # select
    "published_at": "Published Date",   # date
}

_SELECT = SelectFromSelect()

BLOG_CODECS = {
    "name": PlainTextFromTitle(),
    "description": PlainTextFromRichText(),
    "type": _SELECT,
    "tags": MultiSelectFromMultiSelect(),
    "status": _SELECT,
    "published_at": DateFromNotionDate(),
}


def _iso(value: str | dt.date) -> str:
    return value if isinstance(value, str) else value.isoformat()


class BlogArticleAdapter(EntityAdapter):
    name = "blog"
    config: AdapterConfig = make_config_from_annotations(BLOG_PROPERTIES, BLOG_CODECS)

    def to_query(self, params: ListParams) -> dict[str, Any]:
        """Build the query body for a blog listing.

        Filters are combined with ``and``.  Without a sort key the newest
        pages (by creation time) come first.
        """
        p = BLOG_PROPERTIES
        clauses: list[dict[str, Any]] = []
        f = params.filter
        if f is not None:
            if f.status_equals:
                clauses.append({"property": p["status"], "select": {"equals": f.status_equals}})
            if f.type_equals:
                clauses.append({"property": p["type"], "select": {"equals": f.type_equals}})
            for tag in f.tag_in or []:
                clauses.append({"property": p["tags"], "multi_select": {"contains": tag}})
            if f.published_after:
                clauses.append({
                    "property": p["published_at"],
                    "date": {"on_or_after": _iso(f.published_after)},
                })
            if f.published_before:
                clauses.append({
                    "property": p["published_at"],
                    "date": {"on_or_before": _iso(f.published_before)},
                })

        sort = params.sort
        if sort is not None and sort.key == "name":
            order: dict[str, Any] = {"property": p["name"], "direction": sort.direction}
        elif sort is not None and sort.key == "publishedAt":
            order = {"property": p["published_at"], "direction": sort.direction}
        elif sort is not None and sort.key == "updatedAt":
            order = {"timestamp": "last_edited_time", "direction": sort.direction}
        else:
            order = {
                "timestamp": "created_time",
                "direction": sort.direction if sort is not None else "descending",
            }

        query: dict[str, Any] = {"sorts": [order], "page_size": params.page_size}
        if clauses:
            query["filter"] = {"and": clauses}
        if params.start_cursor is not None:
            query["start_cursor"] = params.start_cursor
        return query
