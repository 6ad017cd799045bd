"""Bounded, time-boxed cache of normalized database schemas.

:class:`SchemaCache` is keyed by collection (database) id.  Entries
younger than the TTL are served without a fetch; older entries are
refreshed, and only served (as a counted *stale read*) when the refresh
fails.  When full, the least recently accessed entry is evicted.

The cache is purely advisory: nothing depends on it for correctness, and
it holds no state across process restarts.  All mutations happen in
synchronous sections between awaits, so concurrent coroutines on one event
loop never observe a half-updated entry.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from notionbridge.errors import NotionBridgeError
from notionbridge.models import NormalizedSchema
from notionbridge.observability import MetricsHook, NoopMetricsHook, get_logger

log = get_logger("notionbridge.schema_cache")

SchemaFetcher = Callable[[], Awaitable[NormalizedSchema]]


@dataclass
class CacheEntry:
    """Bookkeeping for one cached schema.  Owned by :class:`SchemaCache`."""

    schema: NormalizedSchema
    fetched_at: float
    last_accessed_at: float
    hits: int = 0
    refreshes: int = 0
    stale_reads: int = 0


@dataclass(frozen=True)
class CacheStats:
    """Read-only copy of an entry's counters."""

    hits: int
    refreshes: int
    stale_reads: int
    fetched_at: float
    last_accessed_at: float


class SchemaCache:
    """TTL + LRU bounded map of collection id to :class:`NormalizedSchema`.

    Parameters
    ----------
    ttl_seconds:
        Age after which an entry must be refreshed.
    max_entries:
        Size bound; inserting beyond it evicts the least recently accessed
        entry.
    clock:
        Monotonic time source in seconds.  Injectable for tests.
    metrics:
        Optional :class:`~notionbridge.observability.MetricsHook`.
    """

    def __init__(
        self,
        ttl_seconds: float = 600.0,
        max_entries: int = 100,
        *,
        clock: Callable[[], float] = time.monotonic,
        metrics: MetricsHook | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        # Ordered from least to most recently accessed.
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    # -- lookups -----------------------------------------------------------

    async def get_schema(
        self,
        collection_id: str,
        fetch: SchemaFetcher,
    ) -> NormalizedSchema:
        """Return the schema for *collection_id*, fetching when needed.

        *fetch* is awaited only when there is no entry or it has expired.
        If it raises and an expired entry exists, that entry's schema is
        returned instead and the error is logged.  With no entry at all the
        error propagates.
        """
        now = self._clock()
        entry = self._entries.get(collection_id)

        if entry is not None and now - entry.fetched_at < self._ttl:
            entry.hits += 1
            self._touch(collection_id, entry, now)
            self._metrics.increment("notionbridge.schema_cache_hits_total")
            return entry.schema

        try:
            schema = await fetch()
        except NotionBridgeError as exc:
            # Re-read: the entry may have been invalidated while we awaited.
            stale = self._entries.get(collection_id)
            if stale is None:
                raise
            stale.stale_reads += 1
            self._touch(collection_id, stale, self._clock())
            self._metrics.increment("notionbridge.schema_cache_stale_reads_total")
            log.warning(
                "Schema refresh failed; serving stale entry",
                extra={
                    "extra_fields": {
                        "op": "get_schema",
                        "collection_id": collection_id,
                        "error_kind": type(exc).__name__,
                        "error": exc.message,
                        "stale_reads": stale.stale_reads,
                    }
                },
            )
            return stale.schema

        self._store(collection_id, schema)
        return schema

    def peek(self, collection_id: str) -> NormalizedSchema | None:
        """Return the cached schema (fresh or stale) without touching it."""
        entry = self._entries.get(collection_id)
        return entry.schema if entry is not None else None

    def stats(self, collection_id: str) -> CacheStats | None:
        entry = self._entries.get(collection_id)
        if entry is None:
            return None
        return CacheStats(
            hits=entry.hits,
            refreshes=entry.refreshes,
            stale_reads=entry.stale_reads,
            fetched_at=entry.fetched_at,
            last_accessed_at=entry.last_accessed_at,
        )

    # -- mutations ---------------------------------------------------------

    def invalidate(self, collection_id: str) -> bool:
        """Drop the entry for *collection_id*.  Returns whether one existed."""
        removed = self._entries.pop(collection_id, None) is not None
        if removed:
            self._metrics.gauge("notionbridge.schema_cache_size", len(self._entries))
            log.debug(
                "Schema cache entry invalidated",
                extra={"extra_fields": {"op": "invalidate", "collection_id": collection_id}},
            )
        return removed

    def clear(self) -> None:
        self._entries.clear()
        self._metrics.gauge("notionbridge.schema_cache_size", 0)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, collection_id: object) -> bool:
        return collection_id in self._entries

    # -- internals ---------------------------------------------------------

    def _touch(self, collection_id: str, entry: CacheEntry, now: float) -> None:
        entry.last_accessed_at = now
        self._entries.move_to_end(collection_id)

    def _store(self, collection_id: str, schema: NormalizedSchema) -> None:
        now = self._clock()
        previous = self._entries.pop(collection_id, None)

        if previous is not None and (
            previous.schema.properties_hash != schema.properties_hash
            or previous.schema.last_modified_at != schema.last_modified_at
        ):
            log.info(
                "Schema changed",
                extra={
                    "extra_fields": {
                        "op": "get_schema",
                        "collection_id": collection_id,
                        "previous_hash": previous.schema.properties_hash,
                        "properties_hash": schema.properties_hash,
                        "last_modified_at": schema.last_modified_at,
                    }
                },
            )

        while len(self._entries) >= self._max_entries:
            evicted_id, _ = self._entries.popitem(last=False)
            log.debug(
                "Schema cache entry evicted",
                extra={"extra_fields": {"op": "evict", "collection_id": evicted_id}},
            )

        self._entries[collection_id] = CacheEntry(
            schema=schema,
            fetched_at=now,
            last_accessed_at=now,
            hits=0,
            refreshes=(previous.refreshes if previous else 0) + 1,
            stale_reads=previous.stale_reads if previous else 0,
        )
        self._metrics.increment("notionbridge.schema_cache_refreshes_total")
        self._metrics.gauge("notionbridge.schema_cache_size", len(self._entries))
