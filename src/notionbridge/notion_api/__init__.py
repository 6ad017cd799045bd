"""Async Notion API layer: transport, retries, pagination and endpoints."""

from .blocks import AsyncBlockAPI
from .circuit import CircuitBreaker, CircuitState
from .databases import AsyncDatabaseAPI
from .pages import AsyncPageAPI
from .pagination import collect_all, iterate_pages
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport, classify_status

__all__ = [
    "AsyncBlockAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "CircuitBreaker",
    "CircuitState",
    "classify_status",
    "collect_all",
    "compute_backoff",
    "iterate_pages",
    "should_retry",
]
