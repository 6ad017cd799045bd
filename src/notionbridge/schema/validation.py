"""Check list requests against a database schema before sending them.

Notion rejects filters and sorts that name unknown properties or use the
wrong operator group, but its messages are terse.  These checks run
against the cached schema and return human-readable problems instead.
"""

from __future__ import annotations

from typing import Any

from notionbridge.models import NormalizedSchema

# Property type -> filter operator group Notion expects for it.
_FILTER_KEY_BY_TYPE: dict[str, str] = {
    "title": "title",
    "rich_text": "rich_text",
    "select": "select",
    "multi_select": "multi_select",
    "status": "status",
    "checkbox": "checkbox",
    "number": "number",
    "date": "date",
}

_FILTER_KEYS: frozenset[str] = frozenset(_FILTER_KEY_BY_TYPE.values())


def validate_title_property(
    schema: NormalizedSchema,
    title_property: str | None,
) -> list[str]:
    if not title_property or schema.get(title_property) is not None:
        return []
    return [f"Unknown title property: {title_property}"]


def _collect_filter_errors(
    node: Any,
    types: dict[str, str],
    errors: list[str],
    path: str,
) -> None:
    if not isinstance(node, dict):
        return

    for compound in ("and", "or"):
        children = node.get(compound)
        if isinstance(children, list):
            for i, child in enumerate(children):
                _collect_filter_errors(child, types, errors, f"{path}.{compound}[{i}]")

    prop = node.get("property")
    if not isinstance(prop, str):
        return
    prop_type = types.get(prop)
    if prop_type is None:
        errors.append(f"Unknown filter property: {prop} at {path}")
        return
    leaf_key = next((k for k in node if k != "property" and k in _FILTER_KEYS), None)
    expected = _FILTER_KEY_BY_TYPE.get(prop_type)
    if leaf_key is not None and expected is not None and leaf_key != expected:
        errors.append(
            f"Invalid operator group '{leaf_key}' for property '{prop}' "
            f"(type '{prop_type}'). Expected '{expected}'. at {path}"
        )


def validate_filter(schema: NormalizedSchema, filter: dict[str, Any] | None) -> list[str]:
    """Return problems with the property filter tree *filter*.

    Compound ``and``/``or`` nodes are walked recursively.  Timestamp
    filters (no ``property`` key) are not checked.
    """
    if not filter:
        return []
    errors: list[str] = []
    types = {p.name: p.type for p in schema.properties}
    _collect_filter_errors(filter, types, errors, "filter")
    return errors


def validate_sorts(
    schema: NormalizedSchema,
    sorts: list[dict[str, Any]] | None,
) -> list[str]:
    if not sorts:
        return []
    errors: list[str] = []
    for i, sort in enumerate(sorts):
        if "timestamp" in sort:
            continue
        prop = sort.get("property")
        if schema.get(str(prop)) is None:
            errors.append(f"Unknown sort property: {prop} at sorts[{i}].property")
        direction = sort.get("direction")
        if direction not in ("ascending", "descending"):
            errors.append(f"Invalid sort direction: {direction} at sorts[{i}].direction")
    return errors


def validate_list_request(
    schema: NormalizedSchema,
    *,
    title_property: str | None = None,
    filter: dict[str, Any] | None = None,
    sorts: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Collect every problem with a list request; empty means valid."""
    return [
        *validate_title_property(schema, title_property),
        *validate_filter(schema, filter),
        *validate_sorts(schema, sorts),
    ]
