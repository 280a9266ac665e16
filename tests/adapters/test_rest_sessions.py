"""Tests for the REST session repository.

HTTP traffic is served by ``httpx.MockTransport`` so no real network is used.
"""

from __future__ import annotations

import json

import httpx
import pytest

from pomodoro_cli.adapters.rest_api import RestApiSessionRepository
from pomodoro_cli.exceptions import RemoteStorageError

BASE_URL = "https://api.test/api"


def _repo(handler, token="tok-1") -> RestApiSessionRepository:
    return RestApiSessionRepository(
        BASE_URL,
        token_provider=lambda: token,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_put_sends_record_with_owner(make_record):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    async with _repo(handler) as repo:
        await repo.put("u1", make_record(id="s1"))

    assert seen["method"] == "PUT"
    assert seen["path"] == "/api/v1/sessions/s1"
    assert seen["auth"] == "Bearer tok-1"
    assert seen["body"]["ownerId"] == "u1"
    assert seen["body"]["plannedDurationMinutes"] == 25


@pytest.mark.asyncio
async def test_query_by_owner_parses_and_sorts(make_record):
    older = make_record(id="a").to_json_dict()
    newer = make_record(id="b", started_at="2024-06-16T09:00:00Z", ended_at="2024-06-16T09:25:00Z").to_json_dict()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["owner_id"] == "u1"
        return httpx.Response(200, json={"sessions": [older, newer]})

    async with _repo(handler) as repo:
        records = await repo.query_by_owner("u1")

    assert [r.id for r in records] == ["b", "a"]


@pytest.mark.asyncio
async def test_query_skips_unparsable_documents(make_record):
    good = make_record(id="good").to_json_dict()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[good, {"id": "bad", "plannedDurationMinutes": "many"}])

    async with _repo(handler) as repo:
        records = await repo.query_by_owner("u1")

    assert [r.id for r in records] == ["good"]


@pytest.mark.asyncio
async def test_http_error_status_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    async with _repo(handler) as repo:
        with pytest.raises(RemoteStorageError) as exc_info:
            await repo.query_by_owner("u1")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_transport_error_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    async with _repo(handler) as repo:
        with pytest.raises(RemoteStorageError):
            await repo.batch_delete_by_owner("u1")


@pytest.mark.asyncio
async def test_malformed_body_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    async with _repo(handler) as repo:
        with pytest.raises(RemoteStorageError):
            await repo.query_by_owner("u1")


@pytest.mark.asyncio
async def test_delete_ignores_missing_session():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(404)

    async with _repo(handler) as repo:
        await repo.delete("gone")


@pytest.mark.asyncio
async def test_no_token_sends_no_authorization_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json=[])

    async with _repo(handler, token=None) as repo:
        await repo.query_by_owner("u1")

    assert seen["auth"] is None


@pytest.mark.asyncio
async def test_token_provider_error_becomes_remote_error(make_record):
    def broken_token():
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    repo = RestApiSessionRepository(
        BASE_URL,
        token_provider=broken_token,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
    )
    async with repo:
        with pytest.raises(RemoteStorageError, match="API token"):
            await repo.put("u1", make_record(id="s1"))
