"""Configured Notion database sources.

A source names one database under a kind and alias (``articles/blog``)
and binds it to an entity adapter and a set of write capabilities.

Sources are read from a JSON file::

    {
      "version": "1.0",
      "defaults": {"articles": {"adapter": "blog",
                                "capabilities": {"update": true, "delete": false}}},
      "sources": [
        {"alias": "blog", "kind": "articles", "databaseId": "${BLOG_DB_ID}"}
      ]
    }

``${VAR}`` placeholders in ``databaseId`` are replaced from the
environment.  A source whose database id ends up empty, or whose adapter
is not registered, is skipped with a log message.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from notionbridge.adapters import EntityAdapter, format_validation_error, get_adapter
from notionbridge.errors import SourceConfigError, SourceNotFoundError
from notionbridge.observability import get_logger

log = get_logger("notionbridge.sources")

DEFAULT_SOURCES_PATH = "./sources.config.json"

_ENV_RE = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True)
class Capabilities:
    update: bool = False
    delete: bool = False


@dataclass(frozen=True)
class SourceConfig:
    """One configured source.  ``collection_id`` is the Notion database id."""

    alias: str
    collection_id: str
    kind: str
    adapter: EntityAdapter
    capabilities: Capabilities = field(default_factory=Capabilities)
    description: str | None = None


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------

class _CapabilitiesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    update: bool
    delete: bool


class _SourceItem(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    alias: str = Field(pattern=r"^[a-z][a-z0-9-]*$")
    kind: Literal["articles", "changelog", "projects"]
    database_id: str = Field(alias="databaseId", min_length=1)
    adapter: str | None = None
    capabilities: _CapabilitiesModel | None = None
    description: str | None = None


class _KindDefaults(BaseModel):
    adapter: str | None = None
    capabilities: _CapabilitiesModel | None = None


class SourcesFile(BaseModel):
    version: str
    sources: list[_SourceItem]
    defaults: dict[str, _KindDefaults] = Field(default_factory=dict)


def substitute_env(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace ``${VAR}`` placeholders; unset variables become ``""``."""
    env = os.environ if environ is None else environ

    def _lookup(match: re.Match[str]) -> str:
        name = match.group(1)
        resolved = env.get(name)
        if not resolved:
            log.warning(
                "Environment variable not set, using empty string",
                extra={"extra_fields": {"variable": name}},
            )
            return ""
        return resolved

    return _ENV_RE.sub(_lookup, value)


def _build_source(item: _SourceItem, defaults: dict[str, _KindDefaults], env: Mapping[str, str] | None) -> SourceConfig | None:
    collection_id = substitute_env(item.database_id, env).strip()
    if not collection_id:
        log.warning(
            "Skipping source: database id not configured",
            extra={"extra_fields": {"kind": item.kind, "alias": item.alias}},
        )
        return None

    kind_defaults = defaults.get(item.kind, _KindDefaults())
    adapter_name = item.adapter or kind_defaults.adapter or "default"
    adapter = get_adapter(item.kind, adapter_name)
    if adapter is None:
        log.error(
            "Skipping source: no adapter registered",
            extra={"extra_fields": {"kind": item.kind, "alias": item.alias, "adapter": adapter_name}},
        )
        return None

    caps = item.capabilities or kind_defaults.capabilities
    return SourceConfig(
        alias=item.alias,
        collection_id=collection_id,
        kind=item.kind,
        adapter=adapter,
        capabilities=Capabilities(caps.update, caps.delete) if caps else Capabilities(),
        description=item.description,
    )


def parse_sources(data: Any, environ: Mapping[str, str] | None = None) -> list[SourceConfig]:
    """Validate a decoded sources document and build its sources.

    Raises
    ------
    SourceConfigError
        When *data* does not match the sources file schema.
    """
    try:
        parsed = SourcesFile.model_validate(data)
    except ValidationError as exc:
        raise SourceConfigError(
            f"Invalid sources config: {format_validation_error(exc)}", cause=exc,
        ) from exc
    sources = [_build_source(item, parsed.defaults, environ) for item in parsed.sources]
    return [s for s in sources if s is not None]


def load_sources(
    path: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[SourceConfig]:
    """Read sources from *path*, ``$NOTION_SOURCES_CONFIG`` or the default file.

    Raises
    ------
    SourceConfigError
        When the file is missing, empty, not JSON or fails validation.
    """
    env = os.environ if environ is None else environ
    config_path = Path(path or env.get("NOTION_SOURCES_CONFIG") or DEFAULT_SOURCES_PATH).resolve()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceConfigError(
            f"Failed to read sources config at {config_path}: {exc}",
            context={"path": str(config_path)},
            cause=exc,
        ) from exc
    if not text.strip():
        raise SourceConfigError(
            f"Sources config at {config_path} is empty", context={"path": str(config_path)},
        )
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SourceConfigError(
            f"Sources config at {config_path} is not valid JSON: {exc}",
            context={"path": str(config_path)},
            cause=exc,
        ) from exc

    sources = parse_sources(data, env)
    for s in sources:
        log.info(
            "Loaded source",
            extra={
                "extra_fields": {
                    "kind": s.kind,
                    "alias": s.alias,
                    "update": s.capabilities.update,
                    "delete": s.capabilities.delete,
                }
            },
        )
    if not sources:
        log.warning("No sources configured", extra={"extra_fields": {"path": str(config_path)}})
    return sources


class SourceRegistry:
    """Lookup of configured sources by kind and alias."""

    def __init__(self, sources: Iterable[SourceConfig] = ()) -> None:
        self._sources: list[SourceConfig] = list(sources)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> SourceRegistry:
        return cls(load_sources(path, environ))

    def all(self) -> list[SourceConfig]:
        return list(self._sources)

    def of_kind(self, kind: str) -> list[SourceConfig]:
        return [s for s in self._sources if s.kind == kind]

    def resolve(self, kind: str, alias: str) -> SourceConfig:
        """Return the source registered as *kind*/*alias*.

        Raises
        ------
        SourceNotFoundError
            When no such source is configured.
        """
        for s in self._sources:
            if s.kind == kind and s.alias == alias:
                return s
        raise SourceNotFoundError(kind, alias)

    def __len__(self) -> int:
        return len(self._sources)
