"""Sync remote Notion data into the local cache and read it back.

:class:`NotionDatastore` wires a :class:`~notioncache.connector.NotionConnector`,
a :class:`~notioncache.cache.DataCache` and a
:class:`~notioncache.filestore.FileStore` together.  Its two faces are:

* :attr:`NotionDatastore.sync` -- fetch from Notion, write to the cache;
* :attr:`NotionDatastore.query` -- read from the cache only.

Usage::

    datastore = NotionDatastore(connector, cache, file_store)
    await datastore.sync.databases()
    await datastore.sync.document(document_id)
    doc = await datastore.query.document("handbook", "kvb3a2mq-onboarding")
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from notioncache.cache.base import DataCache
from notioncache.connector import FileCacheHandler, NotionConnector
from notioncache.filestore.base import FileStore
from notioncache.models.objects import ById, BySlug, Database, Document, User, ref
from notioncache.observability import MetricsHook, NoopMetricsHook, get_logger
from notioncache.utils.hashing import url_key

log = get_logger("notioncache.datastore")


def build_file_cache_handler(cache: DataCache, file_store: FileStore) -> FileCacheHandler:
    """Handler that mirrors each remote file once and returns its local URL.

    A URL whose lookup key is already recorded is served from the record
    without downloading again.
    """

    async def handler(url: str) -> str:
        key = url_key(url)
        cached = await cache.is_file_cached(key)
        if cached is not None:
            return cached.url
        data = await file_store.cache_file(key, url)
        recorded = await cache.record_cached_file(data)
        return recorded.url

    return handler


class DatastoreSync:
    """Remote-to-cache operations."""

    def __init__(self, datastore: NotionDatastore) -> None:
        self._ds = datastore

    async def users(self) -> list[User]:
        return await self._ds._timed("users", self._cache_users)

    async def databases(self) -> list[Database]:
        return await self._ds._timed("databases", self._cache_databases)

    async def database_documents(self, database_id: str) -> list[Document]:
        """Cache the properties of every document in a database."""
        async def run() -> list[Document]:
            documents = await self._ds.connector.get_documents_in_database(database_id)
            cached = await self._ds.cache.cache_documents(documents)
            self._ds._metrics.gauge(
                "notioncache.database_documents", float(len(cached)), tags={"database_id": database_id},
            )
            return cached

        return await self._ds._timed("database_documents", run)

    async def document_content(self, document_id: str) -> Document:
        """Refetch and cache a document's block tree unconditionally."""
        async def run() -> Document:
            content = await self._ds.connector.get_document_content(document_id)
            return await self._ds.cache.cache_document_content(document_id, content)

        return await self._ds._timed("document_content", run)

    async def document(self, document_id: str) -> Document:
        """Cache a document's properties, then its blocks if they are stale."""
        async def run() -> Document:
            raw = await self._ds.connector.get_document(document_id)
            document = await self._ds.cache.cache_document(raw)
            if not self._ds.cache.are_cached_document_blocks_stale(document):
                log.debug(
                    "Document blocks up to date",
                    extra={"extra_fields": {"op": "sync_document", "document_id": document_id}},
                )
                return document
            content = await self._ds.connector.get_document_content(document_id)
            return await self._ds.cache.cache_document_content(document_id, content)

        return await self._ds._timed("document", run)

    async def _cache_users(self) -> list[User]:
        return await self._ds.cache.cache_users(await self._ds.connector.get_users())

    async def _cache_databases(self) -> list[Database]:
        return await self._ds.cache.cache_databases(await self._ds.connector.get_connected_databases())


class DatastoreQuery:
    """Cache reads.  Identifiers may be ids or slugs."""

    def __init__(self, datastore: NotionDatastore) -> None:
        self._ds = datastore

    async def document(
        self, database: str | ById | BySlug, document: str | ById | BySlug,
    ) -> Document | None:
        return await self._ds.cache.query_document_in_database(ref(database), ref(document))

    async def documents_in_database(self, database: str | ById | BySlug) -> list[Document]:
        return await self._ds.cache.query_documents_by_database(ref(database))

    async def database(self, database: str | ById | BySlug) -> Database | None:
        return await self._ds.cache.query_database(ref(database))

    async def databases(self) -> list[Database]:
        return await self._ds.cache.query_databases()


class NotionDatastore:
    """Connector, cache and file store behind one object.

    The file-cache handler is bound into the connector here, so every
    fetch made through :attr:`sync` already mirrors its files.

    Parameters
    ----------
    connector:
        Remote reads.
    cache:
        Local store.
    file_store:
        Where remote files are mirrored.
    metrics:
        Optional metrics hook; each sync run is timed.
    """

    def __init__(
        self,
        connector: NotionConnector,
        cache: DataCache,
        file_store: FileStore,
        metrics: MetricsHook | None = None,
    ) -> None:
        self.connector = connector
        self.cache = cache
        self.file_store = file_store
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        connector.set_file_cache_handler(build_file_cache_handler(cache, file_store))

        self.sync = DatastoreSync(self)
        self.query = DatastoreQuery(self)

    async def _timed(self, operation: str, run: Callable[[], Awaitable]):
        t0 = time.monotonic()
        result = await run()
        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing("notioncache.sync_duration_ms", elapsed_ms, tags={"operation": operation})
        log.info(
            "Sync finished",
            extra={"extra_fields": {"op": f"sync_{operation}", "duration_ms": round(elapsed_ms, 1)}},
        )
        return result
