"""Typed record operations on configured sources.

:class:`RecordsRepository` resolves a ``kind``/``source`` pair to its
database and adapter, then lists, reads and writes :class:`DomainRecord`
values through :class:`~notionbridge.service.NotionService`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionbridge.errors import ForbiddenError
from notionbridge.models import DomainRecord, ListParams, ListResult
from notionbridge.observability import BoundLogger, get_logger
from notionbridge.service import NotionService
from notionbridge.sources import SourceConfig, SourceRegistry

log = get_logger("notionbridge.repository")


class RecordsRepository:
    """CRUD over the sources of a :class:`SourceRegistry`.

    Create and update need the source's ``update`` capability, delete its
    ``delete`` capability; otherwise :class:`ForbiddenError` is raised
    before any request is made.  Deleting archives the page.
    """

    def __init__(self, service: NotionService, sources: SourceRegistry) -> None:
        self._service = service
        self._sources = sources

    def _decode(self, cfg: SourceConfig, page: Mapping[str, Any]) -> DomainRecord:
        adapter = cfg.adapter.with_metrics(self._service.config.metrics)
        return adapter.decode_page(source=cfg.alias, collection_id=cfg.collection_id, page=page)

    def _require(self, cfg: SourceConfig, capability: str) -> None:
        if not getattr(cfg.capabilities, capability):
            raise ForbiddenError(
                f"Source {cfg.kind}/{cfg.alias} does not allow {capability}",
                context={"kind": cfg.kind, "source": cfg.alias, "capability": capability},
            )

    async def list(self, kind: str, params: ListParams) -> ListResult[DomainRecord]:
        cfg = self._sources.resolve(kind, params.source)
        query = cfg.adapter.to_query(params)
        BoundLogger(log, op="list", kind=kind, source=cfg.alias).debug(
            "Built query",
            extra={"extra_fields": {"filter": query.get("filter"), "sorts": query.get("sorts")}},
        )
        pages = await self._service.list_pages(
            cfg.collection_id,
            filter=query.get("filter"),
            sorts=query.get("sorts"),
            page_size=query.get("page_size"),
            start_cursor=query.get("start_cursor"),
        )
        return ListResult(
            results=[self._decode(cfg, page) for page in pages.results],
            has_more=pages.has_more,
            next_cursor=pages.next_cursor,
        )

    async def get(self, kind: str, source: str, document_id: str) -> DomainRecord:
        cfg = self._sources.resolve(kind, source)
        return self._decode(cfg, await self._service.get_page(document_id))

    async def create(self, kind: str, source: str, data: Mapping[str, Any]) -> DomainRecord:
        """Create a row from domain values (``name``, ``tags``, ...).

        Raises
        ------
        EncodeError
            When a value does not fit its field.
        """
        cfg = self._sources.resolve(kind, source)
        self._require(cfg, "update")
        properties = cfg.adapter.encode_patch(data)
        page = await self._service.create_page(cfg.collection_id, properties)
        return self._decode(cfg, page)

    async def update(
        self,
        kind: str,
        source: str,
        document_id: str,
        patch: Mapping[str, Any],
    ) -> DomainRecord:
        cfg = self._sources.resolve(kind, source)
        self._require(cfg, "update")
        properties = cfg.adapter.encode_patch(patch)
        page = await self._service.update_page(document_id, properties=properties)
        self._service.cache.invalidate(cfg.collection_id)
        return self._decode(cfg, page)

    async def delete(self, kind: str, source: str, document_id: str) -> None:
        cfg = self._sources.resolve(kind, source)
        self._require(cfg, "delete")
        await self._service.update_page(document_id, archived=True)
        self._service.cache.invalidate(cfg.collection_id)
        BoundLogger(log, op="delete", kind=kind, source=cfg.alias).info(
            "Record archived", extra={"extra_fields": {"document_id": document_id}},
        )
