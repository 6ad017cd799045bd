"""Build database definitions and record validators from schemas.

Two directions:

* :func:`build_properties_from_simple_spec` turns a compact field-type
  spec (``{"Status": {"type": "select", "options": ["Draft"]}}``) into the
  property configuration ``POST /databases`` expects.
* :func:`build_record_validator` turns a :class:`NormalizedSchema` into a
  pydantic model that validates plain property values.  Select-like
  properties with declared options only accept those options.
"""

from __future__ import annotations

import datetime as dt
import keyword
import re
from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

from notionbridge.models import NormalizedSchema, SchemaProperty

# ---------------------------------------------------------------------------
# Simple spec -> Notion property configuration
# ---------------------------------------------------------------------------

SimpleFieldType = Literal[
    "title", "rich_text", "number", "checkbox", "date", "url", "email",
    "phone_number", "files", "people", "relation", "select", "multi_select",
    "status", "formula", "created_time", "last_edited_time", "created_by",
    "last_edited_by",
]

FormulaType = Literal["number", "string", "boolean", "date"]

_OPTION_TYPES: frozenset[str] = frozenset({"select", "multi_select", "status"})


class SimpleFieldSpec(BaseModel):
    """One field of a simplified database definition."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: SimpleFieldType
    options: list[str] | None = None
    formula_type: FormulaType = Field(default="string", alias="formulaType")


def _field_config(spec: SimpleFieldSpec) -> dict[str, Any]:
    if spec.type in _OPTION_TYPES:
        return {"options": [{"name": name} for name in spec.options or []]}
    if spec.type == "formula":
        return {"expression": "", "type": spec.formula_type}
    if spec.type == "relation":
        return {"database_id": "", "single_property": {}}
    return {}


def build_properties_from_simple_spec(
    spec: Mapping[str, SimpleFieldSpec | Mapping[str, Any]],
) -> dict[str, dict[str, Any]]:
    """Translate a simplified field-type spec into Notion property config.

    Field names are trimmed.  Raises :class:`ValueError` for blank names
    and :class:`pydantic.ValidationError` for unknown field types.

    >>> build_properties_from_simple_spec({" Name ": {"type": "title"}})
    {'Name': {'title': {}}}
    """
    properties: dict[str, dict[str, Any]] = {}
    for raw_name, raw_spec in spec.items():
        name = raw_name.strip()
        if not name:
            raise ValueError("Field names must not be blank")
        field_spec = (
            raw_spec if isinstance(raw_spec, SimpleFieldSpec)
            else SimpleFieldSpec.model_validate(raw_spec)
        )
        properties[name] = {field_spec.type: _field_config(field_spec)}
    return properties


# ---------------------------------------------------------------------------
# NormalizedSchema -> pydantic validator
# ---------------------------------------------------------------------------

_DateLike = dt.datetime | dt.date

_SCALAR_TYPES: dict[str, Any] = {
    "title": str,
    "rich_text": str,
    "url": str,
    "email": str,
    "phone_number": str,
    "number": float,
    "checkbox": bool,
    "date": _DateLike,
    "created_time": _DateLike,
    "last_edited_time": _DateLike,
    "people": list[str],
    "relation": list[str],
    "files": list[str],
    "created_by": str,
    "last_edited_by": str,
}

_FORMULA_TYPES: dict[str, Any] = {
    "number": float,
    "string": str,
    "boolean": bool,
    "date": _DateLike,
}


def _python_type(prop: SchemaProperty) -> Any:
    """Return the annotation used to validate values of *prop*."""
    if prop.type in ("select", "status"):
        options = prop.options
        return Literal[tuple(options)] if options else str
    if prop.type == "multi_select":
        options = prop.options
        return list[Literal[tuple(options)]] if options else list[str]
    if prop.type == "formula":
        formula = prop.config.get("formula") or {}
        return _FORMULA_TYPES.get(formula.get("type", ""), Any)
    return _SCALAR_TYPES.get(prop.type, Any)


def _field_name(name: str, taken: set[str]) -> str:
    """Derive a unique Python identifier for a property name."""
    candidate = re.sub(r"\W", "_", name).strip("_").lower() or "field"
    if candidate[0].isdigit() or keyword.iskeyword(candidate) or hasattr(BaseModel, candidate):
        candidate = f"f_{candidate}"
    unique = candidate
    suffix = 2
    while unique in taken:
        unique = f"{candidate}_{suffix}"
        suffix += 1
    taken.add(unique)
    return unique


def build_record_validator(
    schema: NormalizedSchema,
    model_name: str | None = None,
) -> type[BaseModel]:
    """Create a pydantic model validating plain values for *schema*.

    The model is keyed by property name (as aliases) and every field is
    optional.  ``select``/``status`` properties with options become closed
    ``Literal`` sets and ``multi_select`` ones lists of them; without
    options they accept any ``str`` / ``list[str]``.  Unknown property
    types accept any value.
    """
    taken: set[str] = set()
    fields: dict[str, Any] = {}
    for prop in schema.properties:
        annotation = _python_type(prop)
        fields[_field_name(prop.name, taken)] = (
            Optional[annotation],
            Field(default=None, alias=prop.name),
        )
    return create_model(
        model_name or "RecordValues",
        __config__=ConfigDict(populate_by_name=True, extra="ignore"),
        **fields,
    )
