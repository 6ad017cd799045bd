"""Request shapes sent by the database, page and block wrappers."""

from __future__ import annotations

import json

import httpx
from helpers import database_object, json_response, mock_transport

from notionbridge.notion_api import AsyncBlockAPI, AsyncDatabaseAPI, AsyncPageAPI


class _Recorder:
    def __init__(self, body: dict):
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return json_response(200, self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last.content)


PAGE = {"object": "page", "id": "page-1", "properties": {}}
LIST = {"object": "list", "results": [], "has_more": False, "next_cursor": None}


class TestDatabaseAPI:
    async def test_retrieve(self):
        rec = _Recorder(database_object())
        async with mock_transport(rec) as transport:
            db = await AsyncDatabaseAPI(transport).retrieve("db-1")
        assert db["id"] == "db-1"
        assert (rec.last.method, rec.last.url.path) == ("GET", "/v1/databases/db-1")

    async def test_query_sends_only_given_fields(self):
        rec = _Recorder(LIST)
        async with mock_transport(rec) as transport:
            await AsyncDatabaseAPI(transport).query("db-1", page_size=10)
        assert (rec.last.method, rec.last.url.path) == ("POST", "/v1/databases/db-1/query")
        assert rec.last_json == {"page_size": 10}

    async def test_query_full_body(self):
        rec = _Recorder(LIST)
        flt = {"property": "Status", "select": {"equals": "Draft"}}
        sorts = [{"timestamp": "created_time", "direction": "descending"}]
        async with mock_transport(rec) as transport:
            await AsyncDatabaseAPI(transport).query(
                "db-1", filter=flt, sorts=sorts, page_size=5, start_cursor="c1",
            )
        assert rec.last_json == {"filter": flt, "sorts": sorts, "page_size": 5, "start_cursor": "c1"}

    async def test_create(self):
        rec = _Recorder(database_object("db-new"))
        async with mock_transport(rec) as transport:
            await AsyncDatabaseAPI(transport).create("parent-1", "Blog", {"Name": {"title": {}}})
        body = rec.last_json
        assert body["parent"] == {"type": "page_id", "page_id": "parent-1"}
        assert body["title"][0]["text"]["content"] == "Blog"
        assert body["properties"] == {"Name": {"title": {}}}


class TestPageAPI:
    async def test_create_with_children(self):
        rec = _Recorder(PAGE)
        children = [{"type": "paragraph", "paragraph": {"rich_text": []}}]
        async with mock_transport(rec) as transport:
            await AsyncPageAPI(transport).create({"database_id": "db-1"}, {"Title": {}}, children)
        assert rec.last_json == {
            "parent": {"database_id": "db-1"},
            "properties": {"Title": {}},
            "children": children,
        }

    async def test_update_archive_only(self):
        rec = _Recorder(PAGE)
        async with mock_transport(rec) as transport:
            await AsyncPageAPI(transport).update("page-1", archived=True)
        assert (rec.last.method, rec.last.url.path) == ("PATCH", "/v1/pages/page-1")
        assert rec.last_json == {"archived": True}


class TestBlockAPI:
    async def test_retrieve_children_params(self):
        rec = _Recorder(LIST)
        async with mock_transport(rec) as transport:
            await AsyncBlockAPI(transport).retrieve_children("page-1", start_cursor="c2")
        assert rec.last.method == "GET"
        assert rec.last.url.path == "/v1/blocks/page-1/children"
        assert rec.last.url.params["start_cursor"] == "c2"
        assert rec.last.url.params["page_size"] == "100"

    async def test_append_children(self):
        rec = _Recorder(LIST)
        blocks = [{"type": "paragraph", "paragraph": {"rich_text": []}}]
        async with mock_transport(rec) as transport:
            await AsyncBlockAPI(transport).append_children("page-1", blocks)
        assert rec.last.method == "PATCH"
        assert rec.last_json == {"children": blocks}

    async def test_delete(self):
        rec = _Recorder({"object": "block", "id": "b1", "type": "paragraph", "archived": True})
        async with mock_transport(rec) as transport:
            await AsyncBlockAPI(transport).delete("b1")
        assert (rec.last.method, rec.last.url.path) == ("DELETE", "/v1/blocks/b1")
