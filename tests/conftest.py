"""Shared test fixtures for the notioncache test suite.

* ``config`` -- fast, deterministic :class:`NotioncacheConfig`.
* ``notion`` -- builders for raw Notion API payloads.
* ``fake_notion`` -- an in-memory Notion API served through
  ``httpx.MockTransport``.
* ``connector`` -- a :class:`NotionConnector` on ``fake_notion`` with a
  pass-through file handler bound.
* ``cache`` -- a connected in-memory :class:`SQLiteDataCache` driven by
  ``clock``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from notioncache.cache.sqlite import SQLiteDataCache
from notioncache.config import NotioncacheConfig
from notioncache.connector import NotionConnector
from notioncache.notion_api import NotionTransport

BASE_URL = "https://api.notion.com/v1"


def make_config(**overrides: Any) -> NotioncacheConfig:
    """Return a NotioncacheConfig tuned for fast, deterministic tests."""
    defaults: dict[str, Any] = dict(
        token="test-token-1234",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # Use a high RPS so the token bucket never blocks during tests.
        rate_limit_rps=10_000.0,
        database_path=":memory:",
    )
    defaults.update(overrides)
    return NotioncacheConfig(**defaults)


# ---------------------------------------------------------------------------
# Raw Notion payloads
# ---------------------------------------------------------------------------

class NotionPayloads:
    """Builders for the JSON objects the Notion API returns."""

    @staticmethod
    def rich_text(*texts: str) -> list[dict[str, Any]]:
        return [
            {
                "type": "text",
                "text": {"content": text, "link": None},
                "annotations": {
                    "bold": False,
                    "italic": False,
                    "strikethrough": False,
                    "underline": False,
                    "code": False,
                    "color": "default",
                },
                "plain_text": text,
                "href": None,
            }
            for text in texts
        ]

    @staticmethod
    def block(
        kind: str,
        block_id: str,
        data: dict[str, Any] | None = None,
        *,
        has_children: bool = False,
    ) -> dict[str, Any]:
        return {
            "object": "block",
            "id": block_id,
            "type": kind,
            "has_children": has_children,
            kind: data if data is not None else {},
        }

    @classmethod
    def text_block(cls, kind: str, block_id: str, text: str = "", **kwargs: Any) -> dict[str, Any]:
        return cls.block(kind, block_id, {"rich_text": cls.rich_text(text), "color": "default"}, **kwargs)

    @staticmethod
    def list_response(results: list[dict[str, Any]], next_cursor: str | None = None) -> dict[str, Any]:
        return {
            "object": "list",
            "results": results,
            "has_more": next_cursor is not None,
            "next_cursor": next_cursor,
        }

    @classmethod
    def page(
        cls,
        page_id: str,
        title: str = "",
        *,
        database_id: str | None = "db-1",
        properties: dict[str, Any] | None = None,
        last_edited_time: str = "2024-05-01T10:00:00.000Z",
        **extra: Any,
    ) -> dict[str, Any]:
        props: dict[str, Any] = {"Name": {"id": "title", "type": "title", "title": cls.rich_text(title) if title else []}}
        props.update(properties or {})
        parent = {"type": "database_id", "database_id": database_id} if database_id else {"type": "workspace"}
        return {
            "object": "page",
            "id": page_id,
            "parent": parent,
            "url": f"https://www.notion.so/{page_id.replace('-', '')}",
            "created_time": "2024-01-01T00:00:00.000Z",
            "last_edited_time": last_edited_time,
            "cover": None,
            "icon": None,
            "properties": props,
            **extra,
        }

    @classmethod
    def database(
        cls,
        database_id: str,
        title: str,
        properties: dict[str, Any] | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        return {
            "object": "database",
            "id": database_id,
            "title": cls.rich_text(title),
            "url": f"https://www.notion.so/{database_id.replace('-', '')}",
            "created_time": "2024-01-01T00:00:00.000Z",
            "last_edited_time": "2024-02-01T00:00:00.000Z",
            "cover": None,
            "icon": None,
            "properties": properties if properties is not None else {
                "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            },
            **extra,
        }

    @staticmethod
    def user(user_id: str, name: str, *, bot: bool = False, avatar_url: str | None = None) -> dict[str, Any]:
        return {
            "object": "user",
            "id": user_id,
            "type": "bot" if bot else "person",
            "name": name,
            "avatar_url": avatar_url,
        }


@pytest.fixture
def notion() -> type[NotionPayloads]:
    return NotionPayloads


# ---------------------------------------------------------------------------
# Fake Notion API
# ---------------------------------------------------------------------------

class FakeNotion:
    """Serve canned responses per ``(method, path)``.

    Responses queued for a route are served in order; the last one is
    repeated once the others are used up.  Unknown routes answer 404 the
    way Notion does.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(
                404,
                json={"object": "error", "code": "object_not_found", "message": f"Could not find {path}"},
            )
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def paths(self, method: str | None = None) -> list[str]:
        return [
            r.url.path.removeprefix("/v1")
            for r in self.requests
            if method is None or r.method == method
        ]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))

    def transport(self, config: NotioncacheConfig) -> NotionTransport:
        return NotionTransport(config, client=self.client())


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [call["name"] for call in self.increments + self.timings + self.gauges]


class StepClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


async def passthrough_handler(url: str) -> str:
    return url


@pytest.fixture
def config() -> NotioncacheConfig:
    return make_config()


@pytest.fixture
def fake_notion() -> FakeNotion:
    return FakeNotion()


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
async def transport(fake_notion: FakeNotion, config: NotioncacheConfig):
    t = fake_notion.transport(config)
    yield t
    await t.close()


@pytest.fixture
def connector(transport: NotionTransport, metrics: RecordingMetricsHook) -> NotionConnector:
    c = NotionConnector(transport, metrics=metrics)
    c.set_file_cache_handler(passthrough_handler)
    return c


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
async def cache(clock: StepClock):
    async with SQLiteDataCache(":memory:", clock=clock) as c:
        yield c
