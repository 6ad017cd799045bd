"""Block API wrapper for the Notion ``/blocks`` endpoints.

Only the calls needed to read and replace a page's top-level content are
wrapped: list children one page at a time, append children, delete.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport
from .wire import BlockObject, ListResponse


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        """Fetch one page of a block's children.

        Use with :func:`~notionbridge.notion_api.pagination.collect_all` to
        enumerate every child.
        """
        params: dict[str, Any] = {"page_size": page_size}
        if start_cursor is not None:
            params["start_cursor"] = start_cursor
        return await self._transport.execute(
            "GET", f"/blocks/{block_id}/children",
            response_model=ListResponse, params=params,
        )

    async def append_children(
        self,
        block_id: str,
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Append up to 100 blocks to the end of *block_id*'s children."""
        return await self._transport.execute(
            "PATCH", f"/blocks/{block_id}/children",
            response_model=ListResponse, json={"children": children},
        )

    async def delete(self, block_id: str) -> dict[str, Any]:
        """Delete (archive) a block."""
        return await self._transport.execute(
            "DELETE", f"/blocks/{block_id}", response_model=BlockObject,
        )
