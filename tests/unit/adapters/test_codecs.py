"""Tests for the per-field property codecs."""

from __future__ import annotations

import datetime as dt

import pytest

from notionbridge.adapters.codecs import (
    BooleanFromCheckbox,
    DateFromNotionDate,
    EmailFromEmail,
    FirstUrlFromFiles,
    MultiSelectFromMultiSelect,
    NumberFromFormula,
    NumberFromNumber,
    PeopleIdsFromPeople,
    PlainTextFromRichText,
    PlainTextFromTitle,
    RelationIdsFromRelation,
    SelectFromSelect,
    UrlFromUrl,
    UrlListFromFiles,
)
from notionbridge.errors import DecodeError, EncodeError


class TestTextCodecs:
    def test_title_concatenates_runs(self):
        wire = {"title": [{"plain_text": "Hello "}, {"text": {"content": "World"}}]}
        assert PlainTextFromTitle().decode(wire) == "Hello World"

    def test_title_encode(self):
        assert PlainTextFromTitle().encode("Hi") == {
            "title": [{"type": "text", "text": {"content": "Hi"}}]
        }

    def test_rich_text_empty(self):
        assert PlainTextFromRichText().decode({"rich_text": []}) == ""

    def test_rich_text_wrong_shape(self):
        with pytest.raises(DecodeError) as exc_info:
            PlainTextFromRichText().decode({"title": []})
        assert exc_info.value.message.startswith("rich_text:")

    def test_missing_property(self):
        with pytest.raises(DecodeError, match="property is missing"):
            PlainTextFromTitle().decode(None)

    def test_encode_rejects_non_string(self):
        with pytest.raises(EncodeError):
            PlainTextFromTitle().encode(42)


class TestFileCodecs:
    WIRE = {
        "files": [
            {"name": "a", "type": "file", "file": {"url": "https://s3/a"}},
            {"name": "b", "type": "external", "external": {"url": "https://x/b"}},
            {"name": "c"},
        ]
    }

    def test_url_list_skips_entries_without_url(self):
        assert UrlListFromFiles().decode(self.WIRE) == ["https://s3/a", "https://x/b"]

    def test_url_list_encode(self):
        assert UrlListFromFiles().encode(["u1", "u2"]) == {
            "files": [
                {"name": "file-1", "external": {"url": "u1"}},
                {"name": "file-2", "external": {"url": "u2"}},
            ]
        }

    def test_first_url(self):
        assert FirstUrlFromFiles().decode(self.WIRE) == "https://s3/a"
        assert FirstUrlFromFiles().decode({"files": []}) is None

    def test_first_url_encode_empty(self):
        assert FirstUrlFromFiles().encode(None) == {"files": []}


class TestReferenceCodecs:
    def test_people(self):
        codec = PeopleIdsFromPeople()
        assert codec.decode({"people": [{"id": "u1", "name": "Ada"}, {"id": "u2"}]}) == ["u1", "u2"]
        assert codec.encode(["u1"]) == {"people": [{"id": "u1"}]}

    def test_relation(self):
        codec = RelationIdsFromRelation()
        assert codec.decode({"relation": [{"id": "p1"}]}) == ["p1"]
        assert codec.encode([]) == {"relation": []}

    def test_people_missing_id(self):
        with pytest.raises(DecodeError, match="people.0.id"):
            PeopleIdsFromPeople().decode({"people": [{"name": "Ada"}]})


class TestDateCodec:
    def test_decode_start(self):
        wire = {"date": {"start": "2025-03-01", "end": "2025-03-02"}}
        assert DateFromNotionDate().decode(wire) == "2025-03-01"

    def test_decode_empty(self):
        assert DateFromNotionDate().decode({"date": None}) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2025-03-01", {"date": {"start": "2025-03-01"}}),
            (dt.date(2025, 3, 1), {"date": {"start": "2025-03-01"}}),
            (dt.datetime(2025, 3, 1, 12, 30), {"date": {"start": "2025-03-01T12:30:00"}}),
            ("", {"date": None}),
            (None, {"date": None}),
        ],
    )
    def test_encode(self, value, expected):
        assert DateFromNotionDate().encode(value) == expected

    def test_encode_rejects_number(self):
        with pytest.raises(EncodeError):
            DateFromNotionDate().encode(20250301)


class TestScalarCodecs:
    def test_number(self):
        assert NumberFromNumber().decode({"number": 3}) == 3.0
        assert NumberFromNumber().decode({"number": None}) is None
        assert NumberFromNumber().encode(2.5) == {"number": 2.5}

    def test_number_encode_rejects_bool_and_str(self):
        with pytest.raises(EncodeError):
            NumberFromNumber().encode(True)
        with pytest.raises(EncodeError):
            NumberFromNumber().encode("3")

    def test_formula_number(self):
        wire = {"formula": {"type": "number", "number": 7}}
        assert NumberFromFormula().decode(wire) == 7.0

    def test_formula_wrong_result_type(self):
        with pytest.raises(DecodeError):
            NumberFromFormula().decode({"formula": {"type": "string", "string": "x"}})

    def test_checkbox(self):
        assert BooleanFromCheckbox().decode({"checkbox": True}) is True
        assert BooleanFromCheckbox().encode(False) == {"checkbox": False}
        with pytest.raises(EncodeError):
            BooleanFromCheckbox().encode("yes")

    @pytest.mark.parametrize(
        ("codec", "wire"),
        [
            (NumberFromNumber(), {"type": "number", "number": "12"}),
            (BooleanFromCheckbox(), {"type": "checkbox", "checkbox": "yes"}),
            (BooleanFromCheckbox(), {"type": "checkbox", "checkbox": 1}),
            (UrlFromUrl(), {"type": "url", "url": 42}),
        ],
    )
    def test_decode_does_not_coerce_wire_types(self, codec, wire):
        with pytest.raises(DecodeError):
            codec.decode(wire)

    def test_url_and_email(self):
        assert UrlFromUrl().decode({"url": "https://x"}) == "https://x"
        assert UrlFromUrl().encode("") == {"url": None}
        assert EmailFromEmail().decode({"email": None}) is None
        assert EmailFromEmail().encode("a@b.c") == {"email": "a@b.c"}


class TestSelectCodecs:
    def test_select(self):
        codec = SelectFromSelect()
        assert codec.decode({"select": {"name": "Draft", "color": "red"}}) == "Draft"
        assert codec.decode({"select": None}) is None
        assert codec.encode("Live") == {"select": {"name": "Live"}}
        assert codec.encode(None) == {"select": None}

    def test_multi_select(self):
        codec = MultiSelectFromMultiSelect()
        assert codec.decode({"multi_select": [{"name": "a"}, {"name": "b"}]}) == ["a", "b"]
        assert codec.encode(["x"]) == {"multi_select": [{"name": "x"}]}

    def test_multi_select_encode_rejects_ints(self):
        with pytest.raises(EncodeError):
            MultiSelectFromMultiSelect().encode([1, 2])

    def test_error_keeps_cause(self):
        with pytest.raises(DecodeError) as exc_info:
            SelectFromSelect().decode({"select": "Draft"})
        assert exc_info.value.cause is not None
