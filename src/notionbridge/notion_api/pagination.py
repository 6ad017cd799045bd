"""Generic cursor-follow pagination over Notion list endpoints.

Every list endpoint answers with ``results``, ``has_more`` and
``next_cursor``.  :func:`collect_all` turns any such endpoint into one
complete, order-preserving list.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

PageFetcher = Callable[[str | None], Awaitable[dict[str, Any]]]


async def iterate_pages(fetch_page: PageFetcher) -> AsyncIterator[list[dict[str, Any]]]:
    """Yield the ``results`` of each page in order.

    *fetch_page* is called with ``None`` first, then with the previous
    page's ``next_cursor`` while ``has_more`` is true and a cursor is
    present.  Errors from *fetch_page* propagate unchanged.
    """
    cursor: str | None = None
    while True:
        page = await fetch_page(cursor)
        yield list(page.get("results", []))

        if not page.get("has_more", False):
            return
        cursor = page.get("next_cursor")
        if not cursor:
            return


async def collect_all(fetch_page: PageFetcher) -> list[dict[str, Any]]:
    """Fetch every page and return the concatenated results.

    Stops after the first page whose ``has_more`` is false.  Any error
    aborts the whole collection; pages already fetched are discarded.

    Examples
    --------
    ::

        blocks = await collect_all(
            lambda cursor: api.blocks.retrieve_children(page_id, start_cursor=cursor)
        )
    """
    results: list[dict[str, Any]] = []
    async for page_results in iterate_pages(fetch_page):
        results.extend(page_results)
    return results
