"""Builders for configs, mock transports and Notion wire objects used across tests."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx

from notionbridge.config import NotionBridgeConfig
from notionbridge.notion_api.circuit import CircuitBreaker
from notionbridge.notion_api.transport import AsyncNotionTransport

Handler = Callable[[httpx.Request], httpx.Response]


def make_config(**overrides) -> NotionBridgeConfig:
    """Return a NotionBridgeConfig tuned for fast, deterministic tests."""
    defaults = dict(
        token="test-token-1234",
        retry_base_delay=0.0,
        retry_spacing=0.0,
        retry_jitter=False,
        append_retry_base_delay=0.0,
    )
    defaults.update(overrides)
    return NotionBridgeConfig(**defaults)


def json_response(status_code: int = 200, body: dict | None = None, headers: dict | None = None) -> httpx.Response:
    content = json.dumps(body).encode() if body is not None else b""
    return httpx.Response(status_code, content=content, headers=headers or {})


def mock_transport(
    handler: Handler,
    config: NotionBridgeConfig | None = None,
    breaker: CircuitBreaker | None = None,
) -> AsyncNotionTransport:
    """An AsyncNotionTransport whose HTTP client answers through *handler*."""
    cfg = config or make_config()
    client = httpx.AsyncClient(
        base_url=cfg.base_url,
        transport=httpx.MockTransport(handler),
    )
    return AsyncNotionTransport(cfg, client=client, breaker=breaker)


def database_object(
    database_id: str = "db-1",
    properties: dict | None = None,
    last_edited_time: str = "2025-01-01T00:00:00.000Z",
) -> dict:
    """A minimal Notion database object for a blog-like layout."""
    if properties is None:
        properties = {
            "Title": {"id": "title", "type": "title", "title": {}},
            "Description": {"id": "d", "type": "rich_text", "rich_text": {}},
            "Status": {
                "id": "s",
                "type": "select",
                "select": {"options": [{"name": "Draft"}, {"name": "Published"}]},
            },
            "Tags": {
                "id": "t",
                "type": "multi_select",
                "multi_select": {"options": [{"name": "python"}, {"name": "notion"}]},
            },
            "Published Date": {"id": "p", "type": "date", "date": {}},
        }
    return {
        "object": "database",
        "id": database_id,
        "title": [{"type": "text", "plain_text": "Blog", "text": {"content": "Blog"}}],
        "properties": properties,
        "last_edited_time": last_edited_time,
    }


def title_prop(text: str) -> dict:
    return {
        "type": "title",
        "title": [{"type": "text", "plain_text": text, "text": {"content": text}}],
    }


def rich_text_prop(text: str) -> dict:
    return {
        "type": "rich_text",
        "rich_text": [{"type": "text", "plain_text": text, "text": {"content": text}}],
    }


def blog_page(page_id: str = "page-1", **prop_overrides) -> dict:
    """A raw blog page as returned by the query and pages endpoints."""
    properties = {
        "Title": title_prop("Hello World"),
        "Description": rich_text_prop("A first post"),
        "Content Type": {"type": "select", "select": {"name": "article"}},
        "Tags": {"type": "multi_select", "multi_select": [{"name": "python"}, {"name": "notion"}]},
        "Status": {"type": "select", "select": {"name": "Published"}},
        "Published Date": {"type": "date", "date": {"start": "2025-03-01", "end": None}},
    }
    properties.update(prop_overrides)
    return {
        "object": "page",
        "id": page_id,
        "parent": {"type": "database_id", "database_id": "db-1"},
        "created_time": "2025-02-01T10:00:00.000Z",
        "last_edited_time": "2025-02-02T10:00:00.000Z",
        "created_by": {"object": "user", "id": "user-1", "name": "Ada"},
        "last_edited_by": {"object": "user", "id": "user-2"},
        "archived": False,
        "properties": properties,
    }
