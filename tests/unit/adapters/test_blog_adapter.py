"""Tests for BlogArticleAdapter.to_query."""

from __future__ import annotations

import datetime as dt

from notionbridge.adapters import BlogArticleAdapter
from notionbridge.models import ListFilter, ListParams, SortSpec


def _query(**kwargs):
    return BlogArticleAdapter().to_query(ListParams(source="main", **kwargs))


class TestFilters:
    def test_no_filter(self):
        assert _query() == {
            "sorts": [{"timestamp": "created_time", "direction": "descending"}],
            "page_size": 20,
        }

    def test_all_filters_anded(self):
        q = _query(filter=ListFilter(
            status_equals="Published",
            type_equals="article",
            tag_in=["python", "notion"],
            published_after="2025-01-01",
            published_before=dt.date(2025, 12, 31),
        ))
        assert q["filter"] == {"and": [
            {"property": "Status", "select": {"equals": "Published"}},
            {"property": "Content Type", "select": {"equals": "article"}},
            {"property": "Tags", "multi_select": {"contains": "python"}},
            {"property": "Tags", "multi_select": {"contains": "notion"}},
            {"property": "Published Date", "date": {"on_or_after": "2025-01-01"}},
            {"property": "Published Date", "date": {"on_or_before": "2025-12-31"}},
        ]}

    def test_empty_filter_object(self):
        assert "filter" not in _query(filter=ListFilter())


class TestSortsAndPaging:
    def test_sort_by_name(self):
        q = _query(sort=SortSpec(key="name", direction="ascending"))
        assert q["sorts"] == [{"property": "Title", "direction": "ascending"}]

    def test_sort_by_published(self):
        q = _query(sort=SortSpec(key="publishedAt"))
        assert q["sorts"] == [{"property": "Published Date", "direction": "descending"}]

    def test_sort_by_updated(self):
        q = _query(sort=SortSpec(key="updatedAt", direction="ascending"))
        assert q["sorts"] == [{"timestamp": "last_edited_time", "direction": "ascending"}]

    def test_sort_by_created_keeps_direction(self):
        q = _query(sort=SortSpec(key="createdAt", direction="ascending"))
        assert q["sorts"] == [{"timestamp": "created_time", "direction": "ascending"}]

    def test_cursor_and_page_size(self):
        q = _query(page_size=50, start_cursor="abc")
        assert q["page_size"] == 50
        assert q["start_cursor"] == "abc"
