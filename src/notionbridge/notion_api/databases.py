"""Database API wrapper for the Notion ``/databases`` endpoints."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport
from .wire import DatabaseObject, ListResponse


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, database_id: str) -> dict[str, Any]:
        """Retrieve a database object, including its property schema."""
        return await self._transport.execute(
            "GET", f"/databases/{database_id}", response_model=DatabaseObject,
        )

    async def query(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        """Query one page of rows.

        Parameters
        ----------
        database_id:
            The UUID of the database.
        filter:
            A Notion filter object, passed through unchanged.
        sorts:
            A list of Notion sort objects.
        page_size:
            Rows per page (Notion caps this at 100).
        start_cursor:
            ``next_cursor`` from a previous page.

        Returns
        -------
        dict
            ``{"results": [...], "has_more": bool, "next_cursor": str | None}``
        """
        body: dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        if page_size is not None:
            body["page_size"] = page_size
        if start_cursor is not None:
            body["start_cursor"] = start_cursor
        return await self._transport.execute(
            "POST", f"/databases/{database_id}/query",
            response_model=ListResponse, json=body,
        )

    async def create(
        self,
        parent_page_id: str,
        title: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        """Create a database under a page."""
        body: dict[str, Any] = {
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": [{"type": "text", "text": {"content": title}}],
            "properties": properties,
        }
        return await self._transport.execute(
            "POST", "/databases", response_model=DatabaseObject, json=body,
        )
