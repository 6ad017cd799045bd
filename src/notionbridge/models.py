"""Public data models for notionbridge.

Every result type and parameter object referenced by the public API lives
here.  All types are plain dataclasses; the ones handed out from caches
or decoders are frozen so callers cannot alias internal state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemaProperty:
    """One property declared by a Notion database.

    Attributes
    ----------
    name:
        Property name as shown in Notion (the wire key).
    type:
        Notion property type (``"title"``, ``"select"``, ...).
        ``"unknown"`` when the upstream description carried none.
    config:
        The type-specific configuration object, e.g. ``{"options": [...]}``
        for selects.
    """

    name: str
    type: str
    config: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def options(self) -> list[str]:
        """Declared option names for select-like properties.

        Notion nests them under the type key:
        ``{"type": "select", "select": {"options": [{"name": "Draft"}]}}``.
        """
        typed = self.config.get(self.type)
        raw = typed.get("options") if isinstance(typed, dict) else None
        return [o["name"] for o in raw or [] if isinstance(o, dict) and o.get("name")]


@dataclass(frozen=True)
class NormalizedSchema:
    """A database schema reduced to what the adapters need.

    Derived from the raw database object and never edited by hand.
    ``properties_hash`` is an order-sensitive hash of the ``(name, type)``
    pairs used only to log schema changes.
    """

    collection_id: str
    title_property_name: str | None
    properties: tuple[SchemaProperty, ...]
    last_modified_at: str
    properties_hash: str
    title: str = ""

    def get(self, name: str) -> SchemaProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@dataclass
class ListResult(Generic[T]):
    """One page of results from a cursor-paginated listing."""

    results: list[T]
    has_more: bool = False
    next_cursor: str | None = None


@dataclass(frozen=True)
class TitledPage:
    """A database row reduced to its id and display title."""

    id: str
    title: str


# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainRecord:
    """A typed record decoded from a Notion page by an adapter.

    ``id`` is always ``f"{source}_{document_id}"``.  ``warnings`` is
    ``None`` for a clean decode and lists ``"prop=<name>: <message>"``
    entries when some properties failed to decode.
    """

    id: str
    source: str
    collection_id: str
    document_id: str
    name: str
    created_at: str
    updated_at: str
    description: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    type: str | None = None
    tags: tuple[str, ...] = ()
    status: str | None = None
    published_at: str | None = None
    warnings: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tags"] = list(self.tags)
        if self.warnings is None:
            data.pop("warnings")
        else:
            data["warnings"] = list(self.warnings)
        return data


@dataclass
class ListFilter:
    """Filters understood by record adapters.  ``None`` means unset."""

    status_equals: str | None = None
    type_equals: str | None = None
    tag_in: list[str] | None = None
    published_after: str | None = None
    published_before: str | None = None


@dataclass
class SortSpec:
    key: Literal["name", "publishedAt", "updatedAt", "createdAt"] = "createdAt"
    direction: Literal["ascending", "descending"] = "descending"


@dataclass
class ListParams:
    """Parameters for listing typed records from one source."""

    source: str
    page_size: int = 20
    start_cursor: str | None = None
    filter: ListFilter | None = None
    sort: SortSpec | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= 100:
            raise ValueError(f"page_size must be between 1 and 100, got {self.page_size}")


# ---------------------------------------------------------------------------
# Content replacement
# ---------------------------------------------------------------------------

@dataclass
class ReplaceResult:
    """Outcome of replacing all content blocks of a document.

    Attributes
    ----------
    document_id:
        The page whose content was replaced.
    collection_id:
        The owning database, or ``None`` when it could not be resolved.
    blocks_deleted:
        Existing blocks deleted successfully.
    delete_failures:
        IDs of existing blocks whose deletion failed and was skipped.
    blocks_appended:
        New blocks appended.
    append_batches:
        Number of append calls that succeeded.
    """

    document_id: str
    collection_id: str | None = None
    blocks_deleted: int = 0
    delete_failures: list[str] = field(default_factory=list)
    blocks_appended: int = 0
    append_batches: int = 0
