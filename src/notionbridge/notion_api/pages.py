"""Page API wrapper for the Notion ``/pages`` endpoints."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport
from .wire import PageObject


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(
        self,
        parent: dict[str, Any],
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a new page.

        Parameters
        ----------
        parent:
            Parent reference, e.g. ``{"database_id": "..."}``.
        properties:
            Property values keyed by property name, in wire shape.
        children:
            Optional initial content blocks (at most 100).
        """
        body: dict[str, Any] = {
            "parent": parent,
            "properties": properties,
        }
        if children is not None:
            body["children"] = children
        return await self._transport.execute(
            "POST", "/pages", response_model=PageObject, json=body,
        )

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        return await self._transport.execute(
            "GET", f"/pages/{page_id}", response_model=PageObject,
        )

    async def update(
        self,
        page_id: str,
        properties: dict[str, Any] | None = None,
        archived: bool | None = None,
    ) -> dict[str, Any]:
        """Update a page's properties or archive status.

        Only properties present in *properties* are changed.
        """
        body: dict[str, Any] = {}
        if properties is not None:
            body["properties"] = properties
        if archived is not None:
            body["archived"] = archived
        return await self._transport.execute(
            "PATCH", f"/pages/{page_id}", response_model=PageObject, json=body,
        )
