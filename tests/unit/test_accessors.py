"""Tests for typed property getters."""

from __future__ import annotations

import pytest
from helpers import blog_page, database_object, title_prop

from notionbridge.accessors import (
    DateValue,
    FormulaValue,
    PropertyValue,
    RollupValue,
    get_checkbox,
    get_date,
    get_file_urls,
    get_formula,
    get_multi_select,
    get_number,
    get_people_ids,
    get_property,
    get_relation_ids,
    get_rich_text,
    get_rollup,
    get_select,
    get_status,
    get_title,
    get_url,
)
from notionbridge.schema import normalize_database


def _page(**props) -> dict:
    return {"id": "p", "properties": props}


class TestGetters:
    def test_rich_text_and_title(self):
        page = blog_page()
        assert get_rich_text(page, "Description") == "A first post"
        assert get_rich_text(page, "Title") == "Hello World"
        assert get_rich_text(page, "Missing") is None
        assert get_rich_text(page, "Status") is None

    def test_select_and_status(self):
        page = _page(S={"type": "select", "select": {"name": "Draft"}}, St={"type": "status", "status": {"name": "Done"}})
        assert get_select(page, "S") == "Draft"
        assert get_status(page, "St") == "Done"
        assert get_select(page, "St") is None
        assert get_select(_page(S={"select": None}), "S") is None

    def test_multi_select(self):
        assert get_multi_select(blog_page(), "Tags") == ["python", "notion"]
        assert get_multi_select(_page(T={"multi_select": []}), "T") is None

    def test_date(self):
        page = _page(D={"date": {"start": "2025-01-01", "end": "2025-01-02", "time_zone": "UTC"}})
        assert get_date(page, "D") == DateValue("2025-01-01", "2025-01-02", "UTC")
        assert get_date(_page(D={"date": None}), "D") is None

    def test_number_excludes_bool(self):
        assert get_number(_page(N={"number": 4.5}), "N") == 4.5
        assert get_number(_page(N={"number": True}), "N") is None
        assert get_number(_page(N={"number": None}), "N") is None

    def test_checkbox(self):
        assert get_checkbox(_page(C={"checkbox": False}), "C") is False
        assert get_checkbox(_page(C={"checkbox": "yes"}), "C") is None

    def test_url(self):
        assert get_url(_page(U={"url": "https://x"}), "U") == "https://x"
        assert get_url(_page(U={"url": ""}), "U") is None

    def test_people_and_relation(self):
        page = _page(P={"people": [{"id": "u1"}, {"name": "no id"}]}, R={"relation": [{"id": "r1"}]})
        assert get_people_ids(page, "P") == ["u1"]
        assert get_relation_ids(page, "R") == ["r1"]
        assert get_relation_ids(_page(R={"relation": []}), "R") is None

    def test_file_urls(self):
        page = _page(F={"files": [
            {"name": "a", "file": {"url": "https://s3/a"}},
            {"name": "b", "external": {"url": "https://x/b"}},
            {"name": "c"},
        ]})
        assert get_file_urls(page, "F") == ["https://s3/a", "https://x/b"]
        assert get_file_urls(_page(F={"files": [{"name": "c"}]}), "F") is None

    @pytest.mark.parametrize(
        ("formula", "expected"),
        [
            ({"type": "string", "string": "s"}, FormulaValue("string", "s")),
            ({"type": "number", "number": 2}, FormulaValue("number", 2)),
            ({"type": "boolean", "boolean": True}, FormulaValue("boolean", True)),
            ({"type": "date", "date": {"start": "2025-01-01"}}, FormulaValue("date", DateValue("2025-01-01"))),
            ({"type": "number", "number": None}, None),
            ({"type": "date", "date": None}, None),
        ],
    )
    def test_formula(self, formula, expected):
        assert get_formula(_page(F={"formula": formula}), "F") == expected

    @pytest.mark.parametrize(
        ("rollup", "expected"),
        [
            ({"type": "number", "number": 3}, RollupValue("number", 3)),
            ({"type": "date", "date": {"start": "2025-01-01"}}, RollupValue("date", DateValue("2025-01-01"))),
            ({"type": "array", "array": [{"type": "title"}]}, RollupValue("array", [{"type": "title"}])),
            ({"type": "incomplete"}, None),
        ],
    )
    def test_rollup(self, rollup, expected):
        assert get_rollup(_page(R={"rollup": rollup}), "R") == expected


class TestGetProperty:
    @pytest.fixture
    def schema(self):
        return normalize_database(database_object(properties={
            "Title": {"type": "title"},
            "Status": {"type": "select"},
            "Score": {"type": "number"},
            "Button": {"type": "button"},
        }))

    def test_title_first_run(self, schema):
        page = _page(Title={"title": [{"plain_text": "First"}, {"plain_text": " second"}]})
        assert get_property(page, schema, "Title") == PropertyValue("title", "First")

    def test_title_missing_is_untitled(self, schema):
        assert get_property(_page(), schema, "Title") == PropertyValue("title", "Untitled")

    def test_dispatch_by_declared_type(self, schema):
        page = _page(Status={"select": {"name": "Draft"}}, Score={"number": 7})
        assert get_property(page, schema, "Status") == PropertyValue("select", "Draft")
        assert get_property(page, schema, "Score") == PropertyValue("number", 7)

    def test_unknown_type_returns_raw(self, schema):
        raw = {"type": "button", "button": {}}
        assert get_property(_page(Button=raw), schema, "Button") == PropertyValue("button", raw)

    def test_not_in_schema(self, schema):
        with pytest.raises(KeyError):
            get_property(_page(), schema, "Nope")


class TestGetTitle:
    def test_schema_title_property(self):
        schema = normalize_database(database_object())
        assert get_title(blog_page(), schema) == "Hello World"

    def test_override_wins(self):
        schema = normalize_database(database_object())
        assert get_title(blog_page(), schema, "Description") == "A first post"

    def test_first_run_only(self):
        page = _page(Name={"title": [{"plain_text": "A"}, {"plain_text": "B"}]})
        assert get_title(page, None, "Name") == "A"

    def test_untitled_fallbacks(self):
        assert get_title(_page(Name=title_prop("")), None, "Name") == "Untitled"
        assert get_title(_page(), None) == "Untitled"
