"""Observability: structured logging and metrics hooks for notionbridge."""

from __future__ import annotations

from .logger import BoundLogger, StructuredFormatter, get_logger
from .metrics import InMemoryMetricsHook, MetricsHook, NoopMetricsHook

__all__ = [
    "BoundLogger",
    "InMemoryMetricsHook",
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "get_logger",
]
