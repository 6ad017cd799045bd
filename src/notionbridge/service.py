"""High-level asynchronous Notion service.

:class:`NotionService` is the entry point for callers.  It wires the
transport, the endpoint wrappers, the schema cache and the content
replacement executor from one :class:`NotionBridgeConfig`.

Usage::

    import asyncio
    from notionbridge import NotionBridgeConfig, NotionService

    async def main():
        config = NotionBridgeConfig.from_env()
        async with NotionService(config) as service:
            page = await service.list_records("<database_id>", page_size=10)
            for row in page.results:
                print(row.id, row.title)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionbridge.accessors import get_title
from notionbridge.config import NotionBridgeConfig
from notionbridge.content import ReplaceContentExecutor
from notionbridge.converter import blocks_to_markdown
from notionbridge.errors import BadRequestError, NotionError
from notionbridge.models import ListResult, NormalizedSchema, ReplaceResult, TitledPage
from notionbridge.notion_api.blocks import AsyncBlockAPI
from notionbridge.notion_api.databases import AsyncDatabaseAPI
from notionbridge.notion_api.pages import AsyncPageAPI
from notionbridge.notion_api.pagination import collect_all
from notionbridge.notion_api.transport import AsyncNotionTransport
from notionbridge.observability import get_logger
from notionbridge.schema import (
    SchemaCache,
    build_properties_from_simple_spec,
    normalize_database,
    validate_list_request,
)

log = get_logger("notionbridge.service")


class NotionService:
    """Typed, cached access to Notion databases and page content.

    Parameters
    ----------
    config:
        Service configuration.
    transport:
        Optional pre-built transport (tests inject one over a mock httpx
        client).
    cache:
        Optional schema cache shared with other services.
    """

    def __init__(
        self,
        config: NotionBridgeConfig,
        transport: AsyncNotionTransport | None = None,
        cache: SchemaCache | None = None,
    ) -> None:
        self._config = config
        self._transport = transport if transport is not None else AsyncNotionTransport(config)
        self._databases = AsyncDatabaseAPI(self._transport)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._cache = cache if cache is not None else SchemaCache(
            ttl_seconds=config.schema_cache_ttl_seconds,
            max_entries=config.schema_cache_max_entries,
            metrics=config.metrics,
        )
        self._replacer = ReplaceContentExecutor(
            self._pages,
            self._blocks,
            self._cache,
            delete_concurrency=config.delete_concurrency,
            batch_size=config.append_batch_size,
            append_max_retries=config.append_max_retries,
            append_retry_base_delay=config.append_retry_base_delay,
            metrics=config.metrics,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> NotionService:
        """Build a service from ``NOTION_*`` environment variables."""
        return cls(NotionBridgeConfig.from_env(**overrides))

    @property
    def config(self) -> NotionBridgeConfig:
        return self._config

    @property
    def cache(self) -> SchemaCache:
        return self._cache

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def get_schema(self, collection_id: str) -> NormalizedSchema:
        """Return the normalized schema of a database.

        Served from the schema cache while fresh.  When a refresh fails and
        a stale entry exists, the stale schema is returned.
        """

        async def _fetch() -> NormalizedSchema:
            return normalize_database(await self._databases.retrieve(collection_id))

        return await self._cache.get_schema(collection_id, _fetch)

    async def create_collection(
        self,
        parent_page_id: str,
        title: str,
        spec: Mapping[str, Any],
    ) -> NormalizedSchema:
        """Create a database under a page from a simplified field spec.

        *spec* maps property names to ``{"type": ..., "options": [...],
        "formulaType": ...}``.  See
        :func:`~notionbridge.schema.build_properties_from_simple_spec`.
        """
        properties = build_properties_from_simple_spec(spec)
        database = await self._databases.create(parent_page_id, title, properties)
        return normalize_database(database)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_records(
        self,
        collection_id: str,
        title_property: str | None = None,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> ListResult[TitledPage]:
        """List one page of rows as ``(id, title)`` pairs.

        The title is read from *title_property*, else the configured
        ``"title"`` field override for this database, else the schema's
        title property.  *filter* and *sorts* are checked against the
        schema before the query is sent.

        Raises
        ------
        BadRequestError
            When the title property, filter or sorts reference unknown
            properties or use operators that do not fit their types.
        """
        schema = await self.get_schema(collection_id)
        title_key = (
            title_property
            or self._config.field_overrides.get(collection_id, {}).get("title")
            or schema.title_property_name
        )

        problems = validate_list_request(
            schema, title_property=title_key, filter=filter, sorts=sorts,
        )
        if problems:
            raise BadRequestError(
                "Invalid list request",
                context={"collection_id": collection_id, "errors": problems, "detail": "; ".join(problems)},
            )

        response = await self.query_collection(
            collection_id,
            filter=filter,
            sorts=sorts,
            page_size=page_size,
            start_cursor=start_cursor,
        )
        return ListResult(
            results=[
                TitledPage(id=page["id"], title=get_title(page, schema, title_key))
                for page in response.results
            ],
            has_more=response.has_more,
            next_cursor=response.next_cursor,
        )

    async def list_pages(
        self,
        collection_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> ListResult[dict[str, Any]]:
        """Like :meth:`query_collection`, after confirming the database exists."""
        await self.get_schema(collection_id)
        return await self.query_collection(
            collection_id,
            filter=filter,
            sorts=sorts,
            page_size=page_size,
            start_cursor=start_cursor,
        )

    async def query_collection(
        self,
        collection_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
        start_cursor: str | None = None,
    ) -> ListResult[dict[str, Any]]:
        """Query one page of raw rows.  Notion-native shapes, no adapter."""
        try:
            response = await self._databases.query(
                collection_id,
                filter=filter,
                sorts=sorts,
                page_size=page_size,
                start_cursor=start_cursor,
            )
        except NotionError as exc:
            log.warning(
                "Collection query failed",
                extra={"extra_fields": {"collection_id": collection_id, "error_kind": type(exc).__name__}},
            )
            raise
        return ListResult(
            results=list(response.get("results", [])),
            has_more=bool(response.get("has_more", False)),
            next_cursor=response.get("next_cursor"),
        )

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def get_page(self, document_id: str) -> dict[str, Any]:
        return await self._pages.retrieve(document_id)

    async def create_page(
        self,
        collection_id: str,
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a row in a database from raw wire properties."""
        return await self._pages.create(
            {"database_id": collection_id}, properties, children,
        )

    async def update_page(
        self,
        document_id: str,
        properties: dict[str, Any] | None = None,
        archived: bool | None = None,
    ) -> dict[str, Any]:
        return await self._pages.update(document_id, properties=properties, archived=archived)

    async def get_raw_properties(self, document_id: str) -> dict[str, Any]:
        """Return the page's property bag in wire shape."""
        page = await self._pages.retrieve(document_id)
        return dict(page.get("properties") or {})

    async def update_raw_properties(
        self,
        document_id: str,
        patch: dict[str, Any],
    ) -> dict[str, Any]:
        """Apply a wire-shaped property patch and return the new property bag.

        The owning database's cached schema is invalidated, since select
        options may have been created by the write.
        """
        page = await self._pages.update(document_id, properties=patch)
        parent = page.get("parent") or {}
        collection_id = parent.get("database_id") or parent.get("data_source_id")
        if collection_id:
            self._cache.invalidate(collection_id)
        return dict(page.get("properties") or {})

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def get_document_content(self, document_id: str) -> str:
        """Render the document's top-level blocks as Markdown."""
        blocks = await collect_all(
            lambda cursor: self._blocks.retrieve_children(document_id, start_cursor=cursor)
        )
        return blocks_to_markdown(blocks)

    async def replace_document_content(self, document_id: str, markdown: str) -> ReplaceResult:
        """Replace every top-level block of the document with *markdown*.

        See :class:`~notionbridge.content.ReplaceContentExecutor`.
        """
        return await self._replacer.replace_all(document_id, markdown)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> NotionService:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
