"""Partition block lists into append-sized batches.

The Notion ``append_block_children`` endpoint accepts at most 100 blocks
per request, and replacement content must be appended in document order.
"""

from __future__ import annotations

from typing import Any


def chunk_children(blocks: list[dict[str, Any]], size: int = 100) -> list[list[dict[str, Any]]]:
    """Split *blocks* into consecutive batches of at most *size* items.

    Order is preserved across and within batches.  An empty input returns
    an empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(b) for b in chunk_children([{"type": "paragraph"}] * 205)]
    [100, 100, 5]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not blocks:
        return []

    return [blocks[i : i + size] for i in range(0, len(blocks), size)]
