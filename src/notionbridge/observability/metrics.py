"""Metrics hook protocol and the two bundled implementations.

notionbridge emits counters, timings, and gauges around every Notion API
call, schema cache lookup and content replacement.  By default a
:class:`NoopMetricsHook` is used.  :class:`InMemoryMetricsHook` keeps
aggregates in process for health endpoints and tests; anything satisfying
:class:`MetricsHook` can route data points to a real backend.

Emitted metric names:

* ``notionbridge.requests_total``          -- counter
* ``notionbridge.success_total``           -- counter
* ``notionbridge.errors_total``            -- counter
* ``notionbridge.retries_total``           -- counter
* ``notionbridge.request_duration_ms``     -- timing
* ``notionbridge.schema_cache_hits_total`` -- counter
* ``notionbridge.schema_cache_refreshes_total`` -- counter
* ``notionbridge.schema_cache_stale_reads_total`` -- counter
* ``notionbridge.schema_cache_size``       -- gauge
* ``notionbridge.blocks_deleted_total``    -- counter
* ``notionbridge.blocks_appended_total``   -- counter
* ``notionbridge.decode_warnings_total``   -- counter
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict whose keys and values are
    strings.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


class InMemoryMetricsHook:
    """Aggregate metrics in process memory.

    Tags are ignored; data points are keyed by metric name only.
    :meth:`snapshot` reports counters as-is, timings as ``<name>_avg`` and
    ``<name>_count``, and gauges as their last value.
    """

    __slots__ = ("counters", "gauges", "timings")

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.timings: dict[str, list[float]] = {}
        self.gauges: dict[str, float] = {}

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.counters[name] = self.counters.get(name, 0) + value

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.setdefault(name, []).append(ms)

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges[name] = value

    def snapshot(self) -> dict[str, Any]:
        result: dict[str, Any] = dict(self.counters)
        for name, values in self.timings.items():
            if values:
                result[f"{name}_avg"] = round(sum(values) / len(values), 3)
                result[f"{name}_count"] = len(values)
        result.update(self.gauges)
        return result

    def reset(self) -> None:
        self.counters.clear()
        self.timings.clear()
        self.gauges.clear()
