"""Unit tests for notioncache/notion_api/transport.py.

Covers:
- NotionTransport.request (success, headers, 4xx errors, retry logic)
- 429 handling with Retry-After
- network errors and exhausted retries
- iter_pages / paginate cursor handling for GET and POST
- debug payload dump redaction
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from notioncache.config import NotioncacheConfig
from notioncache.errors import (
    ErrorCode,
    NotioncacheAuthError,
    NotioncacheNetworkError,
    NotioncacheNotFoundError,
    NotioncachePermissionError,
    NotioncacheRateLimitError,
    NotioncacheRetryExhaustedError,
    NotioncacheValidationError,
)
from notioncache.notion_api.transport import NotionTransport

SLEEP = "notioncache.notion_api.transport.asyncio.sleep"


def make_config(**overrides) -> NotioncacheConfig:
    """Return a NotioncacheConfig tuned for fast, deterministic tests."""
    defaults = dict(
        token="test-token-1234",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        rate_limit_rps=10_000.0,
    )
    defaults.update(overrides)
    return NotioncacheConfig(**defaults)


def _raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


# ---------------------------------------------------------------------------
# request
# ---------------------------------------------------------------------------

class TestRequest:
    async def test_success_returns_json(self, fake_notion, transport):
        fake_notion.add("GET", "/pages/p1", {"object": "page", "id": "p1"})
        assert await transport.request("GET", "/pages/p1") == {"object": "page", "id": "p1"}

    async def test_auth_and_version_headers_sent(self, fake_notion, transport):
        fake_notion.add("GET", "/users", {"results": []})
        await transport.request("GET", "/users")
        sent = fake_notion.requests[0]
        assert sent.headers["Authorization"] == "Bearer test-token-1234"
        assert sent.headers["Notion-Version"] == "2022-06-28"

    async def test_empty_body_returns_empty_dict(self, fake_notion, transport):
        fake_notion.add("DELETE", "/blocks/b1", httpx.Response(204))
        assert await transport.request("DELETE", "/blocks/b1") == {}

    @pytest.mark.parametrize(
        "status, error_cls, code",
        [
            (400, NotioncacheValidationError, ErrorCode.VALIDATION_ERROR),
            (401, NotioncacheAuthError, ErrorCode.AUTH_ERROR),
            (403, NotioncachePermissionError, ErrorCode.PERMISSION_ERROR),
            (404, NotioncacheNotFoundError, ErrorCode.NOT_FOUND),
            (409, NotioncacheValidationError, ErrorCode.VALIDATION_ERROR),
        ],
    )
    async def test_client_errors_raise_typed_errors(self, fake_notion, transport, status, error_cls, code):
        fake_notion.add(
            "GET", "/pages/p1",
            httpx.Response(status, json={"object": "error", "code": "x", "message": "nope"}),
        )
        with pytest.raises(error_cls) as exc_info:
            await transport.request("GET", "/pages/p1")
        assert exc_info.value.code == code
        assert exc_info.value.context["status_code"] == status
        assert len(fake_notion.requests) == 1

    async def test_not_found_carries_path(self, transport):
        with pytest.raises(NotioncacheNotFoundError) as exc_info:
            await transport.request("GET", "/pages/missing")
        assert exc_info.value.context["path"] == "/pages/missing"
        assert "Could not find" in exc_info.value.message


# ---------------------------------------------------------------------------
# Retries
# ---------------------------------------------------------------------------

class TestRetries:
    async def test_429_is_retried_after_retry_after_seconds(self, fake_notion, transport):
        fake_notion.add(
            "GET", "/users",
            httpx.Response(429, headers={"Retry-After": "2"}, json={"code": "rate_limited"}),
            {"results": []},
        )
        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            result = await transport.request("GET", "/users")
        assert result == {"results": []}
        sleep.assert_awaited_once_with(2.0)
        assert len(fake_notion.requests) == 2

    async def test_5xx_retried_until_attempts_exhausted(self, fake_notion, transport):
        fake_notion.add("GET", "/users", httpx.Response(503))
        with patch(SLEEP, new_callable=AsyncMock):
            with pytest.raises(NotioncacheRetryExhaustedError) as exc_info:
                await transport.request("GET", "/users")
        assert exc_info.value.context == {"attempts": 3, "last_status_code": 503}
        assert len(fake_notion.requests) == 3

    async def test_persistent_429_exhausts_attempts(self, fake_notion, transport):
        fake_notion.add("GET", "/users", httpx.Response(429, headers={"Retry-After": "1"}))
        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            with pytest.raises(NotioncacheRetryExhaustedError) as exc_info:
                await transport.request("GET", "/users")
        assert sleep.await_count == 2
        cause = exc_info.value.cause
        assert isinstance(cause, NotioncacheRateLimitError)
        assert cause.code == ErrorCode.RATE_LIMITED
        assert cause.context == {"retry_after_seconds": 1.0, "attempt": 3}
        assert exc_info.value.__cause__ is cause

    async def test_exhausted_5xx_has_no_rate_limit_cause(self, fake_notion, transport):
        fake_notion.add("GET", "/users", httpx.Response(502))
        with patch(SLEEP, new_callable=AsyncMock):
            with pytest.raises(NotioncacheRetryExhaustedError) as exc_info:
                await transport.request("GET", "/users")
        assert exc_info.value.cause is None

    async def test_network_error_retried_then_raised(self):
        client = httpx.AsyncClient(
            base_url="https://api.notion.com/v1",
            transport=httpx.MockTransport(_raise_connect_error),
        )
        transport = NotionTransport(make_config(), client=client)
        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            with pytest.raises(NotioncacheNetworkError) as exc_info:
                await transport.request("GET", "/users")
        await transport.close()
        assert sleep.await_count == 2
        assert exc_info.value.context["attempt"] == 3
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    async def test_rate_limit_metrics_emitted(self, fake_notion, metrics):
        transport = fake_notion.transport(make_config(metrics=metrics))
        fake_notion.add("GET", "/users", httpx.Response(429), {"results": []})
        with patch(SLEEP, new_callable=AsyncMock):
            await transport.request("GET", "/users")
        await transport.close()
        names = metrics.names()
        assert "notioncache.rate_limited_total" in names
        assert "notioncache.retries_total" in names
        assert names.count("notioncache.requests_total") == 2


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

class TestPagination:
    async def test_get_cursor_travels_in_query_string(self, fake_notion, transport, notion):
        fake_notion.add(
            "GET", "/blocks/b/children",
            notion.list_response([{"id": "1"}], next_cursor="c2"),
            notion.list_response([{"id": "2"}]),
        )
        pages = [page async for page in transport.iter_pages("GET", "/blocks/b/children")]

        assert [page["results"][0]["id"] for page in pages] == ["1", "2"]
        first, second = fake_notion.requests
        assert "start_cursor" not in first.url.params
        assert first.url.params["page_size"] == "100"
        assert second.url.params["start_cursor"] == "c2"

    async def test_post_cursor_travels_in_body(self, fake_notion, transport, notion):
        fake_notion.add(
            "POST", "/databases/db/query",
            notion.list_response([{"id": "1"}, {"id": "2"}], next_cursor="c2"),
            notion.list_response([{"id": "3"}]),
        )
        items = [
            item async for item in transport.paginate(
                "POST", "/databases/db/query", json={"filter": {"property": "Done"}},
            )
        ]

        assert [item["id"] for item in items] == ["1", "2", "3"]
        bodies = [json.loads(r.content) for r in fake_notion.requests]
        assert bodies[0] == {"filter": {"property": "Done"}, "page_size": 100}
        assert bodies[1] == {"filter": {"property": "Done"}, "page_size": 100, "start_cursor": "c2"}

    async def test_retry_inside_page_keeps_cursor(self, fake_notion, transport, notion):
        fake_notion.add(
            "GET", "/users",
            notion.list_response([{"id": "u1"}], next_cursor="c2"),
            httpx.Response(429),
            notion.list_response([{"id": "u2"}]),
        )
        with patch(SLEEP, new_callable=AsyncMock):
            items = [item async for item in transport.paginate("GET", "/users")]

        assert [item["id"] for item in items] == ["u1", "u2"]
        cursors = [r.url.params.get("start_cursor") for r in fake_notion.requests]
        assert cursors == [None, "c2", "c2"]

    async def test_missing_next_cursor_stops(self, fake_notion, transport):
        fake_notion.add("GET", "/users", {"results": [{"id": "u1"}], "has_more": True, "next_cursor": None})
        items = [item async for item in transport.paginate("GET", "/users")]
        assert items == [{"id": "u1"}]
        assert len(fake_notion.requests) == 1


# ---------------------------------------------------------------------------
# Debug dump & lifecycle
# ---------------------------------------------------------------------------

class TestDebugDump:
    async def test_dump_redacts_signed_urls(self, fake_notion, capsys):
        transport = fake_notion.transport(make_config(debug_dump_payload=True))
        fake_notion.add(
            "GET", "/blocks/img",
            {"image": {"file": {"url": "https://s3.amazonaws.com/a/b.png?X-Amz-Signature=deadbeef"}}},
        )
        await transport.request("GET", "/blocks/img")
        await transport.close()

        err = capsys.readouterr().err
        assert "deadbeef" not in err
        assert "https://s3.amazonaws.com/a/b.png?<signed>" in err

    async def test_no_dump_by_default(self, fake_notion, transport, capsys):
        fake_notion.add("GET", "/users", {"results": []})
        await transport.request("GET", "/users")
        assert "response_status" not in capsys.readouterr().err


class TestLifecycle:
    async def test_async_context_manager_closes_client(self, fake_notion, config):
        client = fake_notion.client()
        async with NotionTransport(config, client=client):
            pass
        assert client.is_closed
