"""Response shapes the transport validates successful bodies against.

The models only pin down the fields notionbridge reads; everything else
Notion sends is kept (``extra="allow"``) and callers keep working with the
raw JSON dict.  A 2xx body that does not fit its model is reported as an
internal server error by the transport.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class ListResponse(_WireModel):
    """A cursor-paginated list (``/databases/{id}/query``, block children)."""

    results: list[dict[str, Any]]
    has_more: bool = False
    next_cursor: str | None = None


class UserRef(_WireModel):
    id: str
    name: str | None = None


class PageObject(_WireModel):
    id: str
    properties: dict[str, Any] = Field(default_factory=dict)
    parent: dict[str, Any] = Field(default_factory=dict)
    created_time: str = ""
    last_edited_time: str = ""
    created_by: UserRef | None = None
    last_edited_by: UserRef | None = None
    archived: bool = False


class DatabaseObject(_WireModel):
    id: str
    title: list[dict[str, Any]] = Field(default_factory=list)
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    last_edited_time: str = ""


class BlockObject(_WireModel):
    id: str
    type: str
    has_children: bool = False
