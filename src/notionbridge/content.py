"""Replace all content blocks of a document.

:class:`ReplaceContentExecutor` runs the replacement as strictly
sequential stages:

0. Resolve the document's owning collection from its ``parent``.  A
   failure here is logged and tolerated.
1. Enumerate every existing top-level block (cursor pagination).
2. Delete them with bounded concurrency.  A failed delete is logged,
   recorded on the result and skipped.
3. Convert the replacement Markdown into blocks.
4. Append the blocks in batches of at most 100, one batch at a time so
   document order is kept.  Each batch is retried with exponential
   backoff; a batch that still fails aborts the replacement.
5. Invalidate the owning collection's cached schema.

There is no rollback.  If appending fails for good after the deletes went
through, the document is left with partial content and the error is
raised to the caller.
"""

from __future__ import annotations

import asyncio
from typing import Any

from notionbridge.converter import markdown_to_blocks
from notionbridge.errors import NotionBridgeError
from notionbridge.models import ReplaceResult
from notionbridge.notion_api.blocks import AsyncBlockAPI
from notionbridge.notion_api.pages import AsyncPageAPI
from notionbridge.notion_api.pagination import collect_all
from notionbridge.notion_api.retries import compute_backoff
from notionbridge.observability import BoundLogger, MetricsHook, NoopMetricsHook, get_logger
from notionbridge.schema.cache import SchemaCache
from notionbridge.utils.chunk import chunk_children

log = get_logger("notionbridge.content")

_PARENT_KEYS: tuple[str, ...] = ("database_id", "data_source_id")


def owning_collection_id(page: dict[str, Any]) -> str | None:
    """Return the database a page belongs to, or ``None``."""
    parent = page.get("parent") or {}
    for key in _PARENT_KEYS:
        value = parent.get(key)
        if value:
            return str(value)
    return None


class ReplaceContentExecutor:
    """Replace a document's content with new Markdown.

    Parameters
    ----------
    pages:
        Page endpoint wrapper (parent lookup).
    blocks:
        Block endpoint wrapper (enumerate, delete, append).
    schema_cache:
        Cache whose entry for the owning collection is invalidated on
        success.
    delete_concurrency:
        Simultaneous deletes.
    batch_size:
        Blocks per append call.
    append_max_retries:
        Extra attempts for a failed append batch.
    append_retry_base_delay:
        First backoff step between append attempts, in seconds.
    metrics:
        Optional metrics hook.
    """

    def __init__(
        self,
        pages: AsyncPageAPI,
        blocks: AsyncBlockAPI,
        schema_cache: SchemaCache,
        *,
        delete_concurrency: int = 5,
        batch_size: int = 100,
        append_max_retries: int = 2,
        append_retry_base_delay: float = 0.1,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._pages = pages
        self._blocks = blocks
        self._cache = schema_cache
        self._delete_concurrency = delete_concurrency
        self._batch_size = batch_size
        self._append_max_retries = append_max_retries
        self._append_retry_base_delay = append_retry_base_delay
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    async def replace_all(self, document_id: str, markdown: str) -> ReplaceResult:
        """Replace every top-level block of *document_id* with *markdown*.

        Returns
        -------
        ReplaceResult
            Counts of deleted and appended blocks, plus the IDs of blocks
            whose deletion failed.

        Raises
        ------
        NotionError
            When enumeration fails, or an append batch still fails after
            its retries.
        """
        result = ReplaceResult(document_id=document_id)
        blog = BoundLogger(log, op="replace_content", document_id=document_id)

        result.collection_id = await self._resolve_collection(document_id, blog)

        existing = await collect_all(
            lambda cursor: self._blocks.retrieve_children(document_id, start_cursor=cursor)
        )
        await self._delete_all(existing, result, blog)

        new_blocks = markdown_to_blocks(markdown)
        for batch in chunk_children(new_blocks, self._batch_size):
            await self._append_batch(document_id, batch, result.append_batches, blog)
            result.append_batches += 1
            result.blocks_appended += len(batch)
            self._metrics.increment("notionbridge.blocks_appended_total", len(batch))

        if result.collection_id is not None:
            self._cache.invalidate(result.collection_id)

        blog.info(
            "Content replaced",
            extra={
                "extra_fields": {
                    "collection_id": result.collection_id,
                    "blocks_deleted": result.blocks_deleted,
                    "delete_failures": len(result.delete_failures),
                    "blocks_appended": result.blocks_appended,
                    "append_batches": result.append_batches,
                }
            },
        )
        return result

    # -- stages ------------------------------------------------------------

    async def _resolve_collection(self, document_id: str, blog: BoundLogger) -> str | None:
        try:
            page = await self._pages.retrieve(document_id)
        except NotionBridgeError as exc:
            blog.warning(
                "Could not resolve owning collection",
                extra={"extra_fields": {"error_kind": type(exc).__name__, "error": exc.message}},
            )
            return None
        return owning_collection_id(page)

    async def _delete_all(
        self,
        existing: list[dict[str, Any]],
        result: ReplaceResult,
        blog: BoundLogger,
    ) -> None:
        semaphore = asyncio.Semaphore(self._delete_concurrency)

        async def _delete_one(block_id: str) -> bool:
            async with semaphore:
                try:
                    await self._blocks.delete(block_id)
                except NotionBridgeError as exc:
                    blog.warning(
                        "Block delete failed; continuing",
                        extra={
                            "extra_fields": {
                                "block_id": block_id,
                                "error_kind": type(exc).__name__,
                                "error": exc.message,
                            }
                        },
                    )
                    result.delete_failures.append(block_id)
                    return False
                return True

        block_ids = [b["id"] for b in existing if b.get("id")]
        outcomes = await asyncio.gather(*(_delete_one(bid) for bid in block_ids))
        result.blocks_deleted = sum(outcomes)
        self._metrics.increment("notionbridge.blocks_deleted_total", result.blocks_deleted)

    async def _append_batch(
        self,
        document_id: str,
        batch: list[dict[str, Any]],
        index: int,
        blog: BoundLogger,
    ) -> None:
        attempt = 0
        while True:
            try:
                await self._blocks.append_children(document_id, batch)
                return
            except NotionBridgeError as exc:
                if attempt >= self._append_max_retries:
                    blog.error(
                        "Append batch failed; document left with partial content",
                        extra={
                            "extra_fields": {
                                "batch": index,
                                "attempts": attempt + 1,
                                "error_kind": type(exc).__name__,
                            }
                        },
                    )
                    raise
                delay = compute_backoff(
                    attempt,
                    base=self._append_retry_base_delay,
                    spacing=None,
                    jitter=False,
                )
                blog.warning(
                    "Append batch failed; retrying",
                    extra={
                        "extra_fields": {
                            "batch": index,
                            "attempt": attempt + 1,
                            "delay": delay,
                            "error_kind": type(exc).__name__,
                        }
                    },
                )
                attempt += 1
                await asyncio.sleep(delay)
