"""notionbridge: typed, cached access to Notion databases and page content.

Public re-exports
-----------------

* **Service:** :class:`NotionService`, :class:`RecordsRepository`
* **Configuration:** :class:`NotionBridgeConfig`, :class:`SourceRegistry`
* **Errors:** Every :class:`NotionBridgeError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses and list parameters

Usage::

    from notionbridge import NotionBridgeConfig, NotionService

    async with NotionService(NotionBridgeConfig(token="secret_xxx")) as service:
        markdown = await service.get_document_content("<page_id>")
"""

from __future__ import annotations

# ── Adapters ───────────────────────────────────────────────────────────
from notionbridge.adapters import BlogArticleAdapter, EntityAdapter, get_adapter, list_adapters

# ── Configuration ───────────────────────────────────────────────────────
from notionbridge.config import NotionBridgeConfig

# ── Errors ──────────────────────────────────────────────────────────────
from notionbridge.errors import (
    BadRequestError,
    ConflictError,
    DecodeError,
    EncodeError,
    ErrorCode,
    ForbiddenError,
    InternalServerError,
    InvalidApiKeyError,
    NotFoundError,
    NotionBridgeError,
    NotionError,
    RateLimitedError,
    RequestTimeoutError,
    ServiceUnavailableError,
    SourceConfigError,
    SourceNotFoundError,
    error_response,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionbridge.models import (
    DomainRecord,
    ListFilter,
    ListParams,
    ListResult,
    NormalizedSchema,
    ReplaceResult,
    SchemaProperty,
    SortSpec,
    TitledPage,
)

# ── Service ─────────────────────────────────────────────────────────────
from notionbridge.repository import RecordsRepository
from notionbridge.service import NotionService
from notionbridge.sources import SourceConfig, SourceRegistry, load_sources

__version__ = "0.1.0"

__all__ = [
    "BadRequestError",
    "BlogArticleAdapter",
    "ConflictError",
    "DecodeError",
    "DomainRecord",
    "EncodeError",
    "EntityAdapter",
    "ErrorCode",
    "ForbiddenError",
    "InternalServerError",
    "InvalidApiKeyError",
    "ListFilter",
    "ListParams",
    "ListResult",
    "NormalizedSchema",
    "NotFoundError",
    "NotionBridgeConfig",
    "NotionBridgeError",
    "NotionError",
    "NotionService",
    "RateLimitedError",
    "RecordsRepository",
    "ReplaceResult",
    "RequestTimeoutError",
    "SchemaProperty",
    "ServiceUnavailableError",
    "SortSpec",
    "SourceConfig",
    "SourceConfigError",
    "SourceNotFoundError",
    "SourceRegistry",
    "TitledPage",
    "__version__",
    "error_response",
    "get_adapter",
    "list_adapters",
    "load_sources",
]
