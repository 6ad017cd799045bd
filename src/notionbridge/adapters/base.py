"""Entity adapter base: decode and encode typed records via field codecs.

Decoding is tolerant.  Each configured field is decoded on its own; a
field that fails is left out of the record and reported as a
``"prop=<wire name>: <message>"`` warning, so one malformed property never
hides the rest of the record.

Encoding is strict.  Only keys present in the patch are encoded, ``None``
values are skipped, and the first failing field aborts the whole patch
with :class:`~notionbridge.errors.EncodeError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from notionbridge.adapters.config import AdapterConfig
from notionbridge.converter import blocks_to_markdown, markdown_to_blocks
from notionbridge.errors import DecodeError, EncodeError
from notionbridge.models import DomainRecord, ListParams
from notionbridge.observability import MetricsHook, NoopMetricsHook, get_logger

log = get_logger("notionbridge.adapters")


@dataclass
class DecodeResult:
    """Decoded field values plus the warnings for fields that failed."""

    values: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.warnings


def _user_label(user: Any) -> str | None:
    if not isinstance(user, dict):
        return None
    return user.get("name") or user.get("id")


class EntityAdapter:
    """Maps Notion pages of one database layout to :class:`DomainRecord`.

    Subclasses provide :attr:`name`, :attr:`config` and :meth:`to_query`.
    """

    name: str = "base"
    config: AdapterConfig = {}

    def __init__(self, metrics: MetricsHook | None = None) -> None:
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def with_metrics(self, metrics: MetricsHook) -> EntityAdapter:
        """Return a copy of this adapter reporting to *metrics*."""
        return type(self)(metrics=metrics)

    # -- decode ------------------------------------------------------------

    def decode_fields(
        self,
        properties: Mapping[str, Any],
        *,
        source: str = "",
        document_id: str = "",
    ) -> DecodeResult:
        result = DecodeResult()
        for key, mapping in self.config.items():
            try:
                result.values[key] = mapping.codec.decode(properties.get(mapping.wire_name))
            except DecodeError as exc:
                log.warning(
                    "Property decode failed",
                    extra={
                        "extra_fields": {
                            "adapter": self.name,
                            "source": source,
                            "document_id": document_id,
                            "property": mapping.wire_name,
                            "error": exc.message,
                        }
                    },
                )
                result.warnings.append(f"prop={mapping.wire_name}: {exc.message}")
        if result.warnings:
            self._metrics.increment(
                "notionbridge.decode_warnings_total",
                len(result.warnings),
                tags={"adapter": self.name},
            )
        return result

    def decode_page(
        self,
        *,
        source: str,
        collection_id: str,
        page: Mapping[str, Any],
    ) -> DomainRecord:
        """Build a :class:`DomainRecord` from a raw page.

        Fields that fail to decode are left at their defaults and named in
        ``warnings``; ``warnings`` is ``None`` when every field decoded.
        """
        document_id = str(page.get("id", ""))
        decoded = self.decode_fields(
            page.get("properties") or {}, source=source, document_id=document_id,
        )
        values = decoded.values
        return DomainRecord(
            id=f"{source}_{document_id}",
            source=source,
            collection_id=collection_id,
            document_id=document_id,
            name=(values.get("name") or "").strip(),
            created_at=page.get("created_time", ""),
            updated_at=page.get("last_edited_time", ""),
            description=values.get("description"),
            created_by=_user_label(page.get("created_by")),
            updated_by=_user_label(page.get("last_edited_by")),
            type=values.get("type"),
            tags=tuple(t.strip() for t in values.get("tags") or () if t.strip()),
            status=values.get("status"),
            published_at=values.get("published_at"),
            warnings=tuple(decoded.warnings) if decoded.warnings else None,
        )

    # -- encode ------------------------------------------------------------

    def encode_patch(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Encode the configured keys of *patch* into Notion properties.

        Raises
        ------
        EncodeError
            On the first field that cannot be encoded.
        """
        properties: dict[str, Any] = {}
        for key, value in patch.items():
            mapping = self.config.get(key)
            if mapping is None or value is None:
                continue
            try:
                properties[mapping.wire_name] = mapping.codec.encode(value)
            except EncodeError as exc:
                raise EncodeError(
                    f"prop={mapping.wire_name}: {exc.message}",
                    context={"property": mapping.wire_name, "domain_key": key},
                    cause=exc,
                ) from exc
        return properties

    # -- query and content -------------------------------------------------

    def to_query(self, params: ListParams) -> dict[str, Any]:
        """Translate list parameters into a database query body."""
        raise NotImplementedError

    def to_blocks(self, markdown: str) -> list[dict[str, Any]]:
        return markdown_to_blocks(markdown)

    def from_blocks(self, blocks: list[dict[str, Any]]) -> str:
        return blocks_to_markdown(blocks)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, fields={list(self.config)})"
