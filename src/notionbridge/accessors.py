"""Typed read access to raw Notion page property values.

Every getter takes a raw page dict (as returned by the pages and query
endpoints) and a property name, and returns ``None`` when the property is
missing, has another type, or is empty.  Getters never raise.

:func:`get_property` dispatches on the schema's declared type and returns
a :class:`PropertyValue`; types without a dedicated getter come back with
the raw wire value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from notionbridge.models import NormalizedSchema

UNTITLED = "Untitled"


@dataclass(frozen=True)
class DateValue:
    start: str
    end: str | None = None
    timezone: str | None = None


@dataclass(frozen=True)
class FormulaValue:
    """Computed formula result.  ``kind`` is string, number, date or boolean."""

    kind: str
    value: Any


@dataclass(frozen=True)
class RollupValue:
    """Rollup result.  ``kind`` is number, date or array."""

    kind: str
    value: Any


@dataclass(frozen=True)
class PropertyValue:
    """A property value tagged with its schema type."""

    type: str
    value: Any


def _prop(page: dict[str, Any], name: str) -> dict[str, Any] | None:
    prop = (page.get("properties") or {}).get(name)
    return prop if isinstance(prop, dict) else None


def _date_of(raw: Any) -> DateValue | None:
    if not isinstance(raw, dict) or not raw.get("start"):
        return None
    return DateValue(start=raw["start"], end=raw.get("end"), timezone=raw.get("time_zone"))


def _ids(prop: dict[str, Any] | None, key: str) -> list[str] | None:
    items = prop.get(key) if prop else None
    if not isinstance(items, list) or not items:
        return None
    return [item["id"] for item in items if isinstance(item, dict) and item.get("id")]


def get_rich_text(page: dict[str, Any], name: str) -> str | None:
    """Joined ``plain_text`` of a title or rich_text property."""
    prop = _prop(page, name)
    if prop is None:
        return None
    for key in ("title", "rich_text"):
        runs = prop.get(key)
        if isinstance(runs, list):
            return "".join(run.get("plain_text", "") for run in runs if isinstance(run, dict))
    return None


def get_select(page: dict[str, Any], name: str) -> str | None:
    prop = _prop(page, name)
    selected = prop.get("select") if prop else None
    return selected.get("name") if isinstance(selected, dict) else None


def get_status(page: dict[str, Any], name: str) -> str | None:
    prop = _prop(page, name)
    status = prop.get("status") if prop else None
    return status.get("name") if isinstance(status, dict) else None


def get_multi_select(page: dict[str, Any], name: str) -> list[str] | None:
    prop = _prop(page, name)
    options = prop.get("multi_select") if prop else None
    if not isinstance(options, list) or not options:
        return None
    return [o["name"] for o in options if isinstance(o, dict) and o.get("name")]


def get_date(page: dict[str, Any], name: str) -> DateValue | None:
    prop = _prop(page, name)
    return _date_of(prop.get("date")) if prop else None


def get_number(page: dict[str, Any], name: str) -> float | int | None:
    prop = _prop(page, name)
    value = prop.get("number") if prop else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def get_checkbox(page: dict[str, Any], name: str) -> bool | None:
    prop = _prop(page, name)
    value = prop.get("checkbox") if prop else None
    return value if isinstance(value, bool) else None


def get_url(page: dict[str, Any], name: str) -> str | None:
    prop = _prop(page, name)
    value = prop.get("url") if prop else None
    return value if isinstance(value, str) and value else None


def get_people_ids(page: dict[str, Any], name: str) -> list[str] | None:
    return _ids(_prop(page, name), "people")


def get_relation_ids(page: dict[str, Any], name: str) -> list[str] | None:
    return _ids(_prop(page, name), "relation")


def get_file_urls(page: dict[str, Any], name: str) -> list[str] | None:
    """URLs of hosted (``file``) and linked (``external``) attachments."""
    prop = _prop(page, name)
    files = prop.get("files") if prop else None
    if not isinstance(files, list) or not files:
        return None
    urls: list[str] = []
    for entry in files:
        if not isinstance(entry, dict):
            continue
        holder = entry.get("file") if "file" in entry else entry.get("external")
        url = holder.get("url") if isinstance(holder, dict) else None
        if isinstance(url, str) and url:
            urls.append(url)
    return urls or None


def get_formula(page: dict[str, Any], name: str) -> FormulaValue | None:
    prop = _prop(page, name)
    formula = prop.get("formula") if prop else None
    if not isinstance(formula, dict):
        return None
    kind = formula.get("type")
    value = formula.get(kind) if isinstance(kind, str) else None
    if kind == "string" and isinstance(value, str):
        return FormulaValue("string", value)
    if kind == "number" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return FormulaValue("number", value)
    if kind == "boolean" and isinstance(value, bool):
        return FormulaValue("boolean", value)
    if kind == "date":
        date = _date_of(value)
        return FormulaValue("date", date) if date else None
    return None


def get_rollup(page: dict[str, Any], name: str) -> RollupValue | None:
    prop = _prop(page, name)
    rollup = prop.get("rollup") if prop else None
    if not isinstance(rollup, dict):
        return None
    kind = rollup.get("type")
    value = rollup.get(kind) if isinstance(kind, str) else None
    if kind == "number" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return RollupValue("number", value)
    if kind == "date":
        date = _date_of(value)
        return RollupValue("date", date) if date else None
    if kind == "array" and isinstance(value, list):
        return RollupValue("array", value)
    return None


_GETTERS = {
    "rich_text": get_rich_text,
    "select": get_select,
    "multi_select": get_multi_select,
    "date": get_date,
    "number": get_number,
    "checkbox": get_checkbox,
    "url": get_url,
    "status": get_status,
    "people": get_people_ids,
    "relation": get_relation_ids,
    "files": get_file_urls,
    "formula": get_formula,
    "rollup": get_rollup,
}


def _first_title_run(page: dict[str, Any], name: str) -> str | None:
    prop = _prop(page, name)
    runs = prop.get("title") if prop else None
    if isinstance(runs, list) and runs and isinstance(runs[0], dict):
        return runs[0].get("plain_text", "")
    return None


def get_property(page: dict[str, Any], schema: NormalizedSchema, name: str) -> PropertyValue:
    """Read *name* from *page*, typed by the schema.

    Raises
    ------
    KeyError
        When *name* is not a property of *schema*.
    """
    declared = schema.get(name)
    if declared is None:
        raise KeyError(f"Property {name!r} not found in schema {schema.collection_id}")

    if declared.type == "title":
        title = _first_title_run(page, name)
        return PropertyValue("title", title if title is not None else UNTITLED)

    getter = _GETTERS.get(declared.type)
    if getter is None:
        return PropertyValue(declared.type, _prop(page, name))
    return PropertyValue(declared.type, getter(page, name))


def get_title(
    page: dict[str, Any],
    schema: NormalizedSchema | None,
    title_property: str | None = None,
) -> str:
    """Display title of a page.

    *title_property* wins over the schema's title property.  The first
    title run is used when present; a rich_text property falls back to its
    joined text.  Anything else yields ``"Untitled"``.
    """
    name = title_property or (schema.title_property_name if schema else None)
    if not name:
        return UNTITLED
    title = _first_title_run(page, name)
    if title:
        return title
    joined = get_rich_text(page, name)
    return joined if joined else UNTITLED
