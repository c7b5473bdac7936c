"""Composition root.

:func:`build_application` turns a :class:`NotioncacheConfig` into a fully
wired :class:`Application`: transport, connector, cache, file store and
datastore, with the file-cache handler already bound.

Usage::

    config = NotioncacheConfig.from_env()
    async with build_application(config) as app:
        await app.datastore.sync.databases()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import httpx

from notioncache.cache.sqlite import SQLiteDataCache
from notioncache.client import DocumentClient
from notioncache.config import NotioncacheConfig
from notioncache.connector import NotionConnector
from notioncache.datastore import NotionDatastore
from notioncache.filestore.local import LocalFileStore
from notioncache.notion_api import NotionTransport


@dataclass
class Application:
    """Everything :func:`build_application` wires together.

    The cache connection is opened on ``async with`` (or :meth:`start`)
    and every owned resource is released by :meth:`close`.
    """

    config: NotioncacheConfig
    transport: NotionTransport
    connector: NotionConnector
    cache: SQLiteDataCache
    file_store: LocalFileStore
    downloads: httpx.AsyncClient
    datastore: NotionDatastore
    client: DocumentClient

    async def start(self) -> None:
        await self.cache.connect()

    async def close(self) -> None:
        await self.transport.close()
        await self.downloads.aclose()
        await self.cache.close()

    async def __aenter__(self) -> Application:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


def build_application(
    config: NotioncacheConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
    clock: Callable[[], datetime] | None = None,
) -> Application:
    """Wire an :class:`Application` from *config*.

    Parameters
    ----------
    config:
        Transport, cache and file-store settings.
    http_client:
        Optional pre-built client for the Notion API (tests pass one
        backed by ``httpx.MockTransport``).
    clock:
        Optional clock for cache timestamps.
    """
    transport = NotionTransport(config, client=http_client)
    connector = NotionConnector(transport, metrics=config.metrics)
    cache = SQLiteDataCache(config.database_path, clock=clock)
    downloads = httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
        proxy=config.http_proxy,
    )
    file_store = LocalFileStore(
        config.file_store_dir,
        config.file_public_base_url,
        client=downloads,
        metrics=config.metrics,
    )
    datastore = NotionDatastore(connector, cache, file_store, metrics=config.metrics)
    return Application(
        config=config,
        transport=transport,
        connector=connector,
        cache=cache,
        file_store=file_store,
        downloads=downloads,
        datastore=datastore,
        client=DocumentClient(datastore),
    )
