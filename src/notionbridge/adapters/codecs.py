"""Per-field codecs between domain values and Notion property JSON.

A codec pairs a pydantic model of the wire property shape with a pydantic
``TypeAdapter`` for the domain value:

* :meth:`FieldCodec.decode` validates the wire property and extracts the
  domain value.  Any mismatch raises :class:`~notionbridge.errors.DecodeError`
  whose message is the formatted validation error.
* :meth:`FieldCodec.encode` validates the domain value strictly and builds
  the wire property.  Any mismatch raises
  :class:`~notionbridge.errors.EncodeError`.

Codecs are stateless; one instance can be shared by every adapter.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Generic, Literal, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from notionbridge.errors import DecodeError, EncodeError

W = TypeVar("W", bound=BaseModel)


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into ``"loc: message"`` lines joined by ``; ``."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "value"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


class FieldCodec(Protocol):
    def decode(self, wire: Any) -> Any: ...

    def encode(self, value: Any) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# Wire property shapes
# ---------------------------------------------------------------------------

class _Prop(BaseModel):
    model_config = ConfigDict(extra="allow")


class _TextContent(_Prop):
    content: str


class TextRun(_Prop):
    type: str = "text"
    plain_text: str | None = None
    text: _TextContent | None = None

    @property
    def value(self) -> str:
        if self.plain_text is not None:
            return self.plain_text
        return self.text.content if self.text is not None else ""


class TitleProp(_Prop):
    title: list[TextRun]


class RichTextProp(_Prop):
    rich_text: list[TextRun]


class _Named(_Prop):
    name: str


class _WithId(_Prop):
    id: str


class _FileUrl(_Prop):
    url: str


class FileEntry(_Prop):
    name: str = ""
    url: str | None = None
    file: _FileUrl | None = None
    external: _FileUrl | None = None

    @property
    def resolved_url(self) -> str | None:
        for holder in (self.file, self.external):
            if holder is not None:
                return holder.url
        return self.url


class FilesProp(_Prop):
    files: list[FileEntry]


class PeopleProp(_Prop):
    people: list[_WithId]


class RelationProp(_Prop):
    relation: list[_WithId]


class _DateRange(_Prop):
    start: str
    end: str | None = None


class DateProp(_Prop):
    date: _DateRange | None


class _FormulaNumber(_Prop):
    type: Literal["number"]
    number: float | None = None


class FormulaNumberProp(_Prop):
    formula: _FormulaNumber


class NumberProp(_Prop):
    number: float | None


class CheckboxProp(_Prop):
    checkbox: bool


class UrlProp(_Prop):
    url: str | None


class EmailProp(_Prop):
    email: str | None


class SelectProp(_Prop):
    select: _Named | None


class MultiSelectProp(_Prop):
    multi_select: list[_Named]


# ---------------------------------------------------------------------------
# Codec base
# ---------------------------------------------------------------------------

class Codec(Generic[W]):
    """Base class binding a wire model and a domain type.

    Subclasses set :attr:`wire_model` and :attr:`domain_type` and implement
    :meth:`_from_wire` and :meth:`_to_wire`.
    """

    wire_model: type[W]
    domain_type: Any = Any

    def __init__(self) -> None:
        self._domain = TypeAdapter(self.domain_type)

    def decode(self, wire: Any) -> Any:
        if wire is None:
            raise DecodeError("property is missing")
        try:
            prop = self.wire_model.model_validate(wire, strict=True)
        except ValidationError as exc:
            raise DecodeError(format_validation_error(exc), cause=exc) from exc
        return self._from_wire(prop)

    def encode(self, value: Any) -> dict[str, Any]:
        try:
            checked = self._domain.validate_python(value, strict=True)
        except ValidationError as exc:
            raise EncodeError(format_validation_error(exc), cause=exc) from exc
        return self._to_wire(checked)

    def _from_wire(self, prop: W) -> Any:
        raise NotImplementedError

    def _to_wire(self, value: Any) -> dict[str, Any]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _single_run(text: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": text}}]


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------

class PlainTextFromTitle(Codec[TitleProp]):
    wire_model = TitleProp
    domain_type = str

    def _from_wire(self, prop: TitleProp) -> str:
        return "".join(run.value for run in prop.title)

    def _to_wire(self, value: str) -> dict[str, Any]:
        return {"title": _single_run(value)}


class PlainTextFromRichText(Codec[RichTextProp]):
    wire_model = RichTextProp
    domain_type = str

    def _from_wire(self, prop: RichTextProp) -> str:
        return "".join(run.value for run in prop.rich_text)

    def _to_wire(self, value: str) -> dict[str, Any]:
        return {"rich_text": _single_run(value)}


class UrlListFromFiles(Codec[FilesProp]):
    wire_model = FilesProp
    domain_type = list[str]

    def _from_wire(self, prop: FilesProp) -> list[str]:
        return [url for url in (f.resolved_url for f in prop.files) if url]

    def _to_wire(self, value: list[str]) -> dict[str, Any]:
        return {
            "files": [
                {"name": f"file-{i + 1}", "external": {"url": url}}
                for i, url in enumerate(value)
            ]
        }


class FirstUrlFromFiles(Codec[FilesProp]):
    wire_model = FilesProp
    domain_type = str | None

    def _from_wire(self, prop: FilesProp) -> str | None:
        return prop.files[0].resolved_url if prop.files else None

    def _to_wire(self, value: str | None) -> dict[str, Any]:
        if not value:
            return {"files": []}
        return {"files": [{"name": "file-1", "external": {"url": value}}]}


class PeopleIdsFromPeople(Codec[PeopleProp]):
    wire_model = PeopleProp
    domain_type = list[str]

    def _from_wire(self, prop: PeopleProp) -> list[str]:
        return [person.id for person in prop.people]

    def _to_wire(self, value: list[str]) -> dict[str, Any]:
        return {"people": [{"id": pid} for pid in value]}


class RelationIdsFromRelation(Codec[RelationProp]):
    wire_model = RelationProp
    domain_type = list[str]

    def _from_wire(self, prop: RelationProp) -> list[str]:
        return [ref.id for ref in prop.relation]

    def _to_wire(self, value: list[str]) -> dict[str, Any]:
        return {"relation": [{"id": rid} for rid in value]}


class DateFromNotionDate(Codec[DateProp]):
    """Date property to its ISO ``start`` string.

    Encode accepts an ISO string, a ``date`` or a ``datetime``; ``None``
    clears the property.
    """

    wire_model = DateProp
    domain_type = str | dt.datetime | dt.date | None

    def _from_wire(self, prop: DateProp) -> str | None:
        return prop.date.start if prop.date is not None else None

    def _to_wire(self, value: str | dt.date | None) -> dict[str, Any]:
        if value is None or value == "":
            return {"date": None}
        iso = value if isinstance(value, str) else value.isoformat()
        return {"date": {"start": iso}}


class NumberFromFormula(Codec[FormulaNumberProp]):
    wire_model = FormulaNumberProp
    domain_type = int | float | None

    def _from_wire(self, prop: FormulaNumberProp) -> float | None:
        return prop.formula.number

    def _to_wire(self, value: float | None) -> dict[str, Any]:
        return {"formula": {"type": "number", "number": value}}


class NumberFromNumber(Codec[NumberProp]):
    wire_model = NumberProp
    domain_type = int | float | None

    def _from_wire(self, prop: NumberProp) -> float | None:
        return prop.number

    def _to_wire(self, value: float | None) -> dict[str, Any]:
        return {"number": value}


class BooleanFromCheckbox(Codec[CheckboxProp]):
    wire_model = CheckboxProp
    domain_type = bool

    def _from_wire(self, prop: CheckboxProp) -> bool:
        return prop.checkbox

    def _to_wire(self, value: bool) -> dict[str, Any]:
        return {"checkbox": value}


class UrlFromUrl(Codec[UrlProp]):
    wire_model = UrlProp
    domain_type = str | None

    def _from_wire(self, prop: UrlProp) -> str | None:
        return prop.url

    def _to_wire(self, value: str | None) -> dict[str, Any]:
        return {"url": value or None}


class EmailFromEmail(Codec[EmailProp]):
    wire_model = EmailProp
    domain_type = str | None

    def _from_wire(self, prop: EmailProp) -> str | None:
        return prop.email

    def _to_wire(self, value: str | None) -> dict[str, Any]:
        return {"email": value or None}


class SelectFromSelect(Codec[SelectProp]):
    wire_model = SelectProp
    domain_type = str | None

    def _from_wire(self, prop: SelectProp) -> str | None:
        return prop.select.name if prop.select is not None else None

    def _to_wire(self, value: str | None) -> dict[str, Any]:
        return {"select": {"name": value} if value else None}


class MultiSelectFromMultiSelect(Codec[MultiSelectProp]):
    wire_model = MultiSelectProp
    domain_type = list[str]

    def _from_wire(self, prop: MultiSelectProp) -> list[str]:
        return [option.name for option in prop.multi_select]

    def _to_wire(self, value: list[str]) -> dict[str, Any]:
        return {"multi_select": [{"name": name} for name in value]}
