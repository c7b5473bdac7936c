"""notioncache -- keep a local, queryable copy of Notion databases.

Public re-exports
-----------------

* **Wiring:** :func:`build_application`, :class:`Application`
* **Configuration:** :class:`NotioncacheConfig`
* **Components:** :class:`NotionConnector`, :class:`SQLiteDataCache`,
  :class:`LocalFileStore`, :class:`NotionDatastore`, :class:`DocumentClient`
* **Errors:** Every :class:`NotioncacheError` subclass and :class:`ErrorCode`

Usage::

    from notioncache import NotioncacheConfig, build_application

    async with build_application(NotioncacheConfig.from_env()) as app:
        await app.datastore.sync.databases()
        docs = await app.client.get_documents("handbook")
"""

from __future__ import annotations

# ── Wiring ──────────────────────────────────────────────────────────────
from notioncache.app import Application, build_application

# ── Components ──────────────────────────────────────────────────────────
from notioncache.cache import DataCache, SQLiteDataCache
from notioncache.client import DocumentClient

# ── Configuration ───────────────────────────────────────────────────────
from notioncache.config import NotioncacheConfig
from notioncache.connector import NotionConnector
from notioncache.datastore import DatastoreQuery, DatastoreSync, NotionDatastore

# ── Errors ──────────────────────────────────────────────────────────────
from notioncache.errors import (
    ErrorCode,
    NotioncacheAuthError,
    NotioncacheDocumentNotFoundError,
    NotioncacheError,
    NotioncacheFileStoreError,
    NotioncacheHandlerNotSetError,
    NotioncacheMappingError,
    NotioncacheNetworkError,
    NotioncacheNotFoundError,
    NotioncachePermissionError,
    NotioncacheRateLimitError,
    NotioncacheRetryExhaustedError,
    NotioncacheValidationError,
)
from notioncache.filestore import FileStore, LocalFileStore

__all__ = [
    "Application",
    "DataCache",
    "DatastoreQuery",
    "DatastoreSync",
    "DocumentClient",
    "ErrorCode",
    "FileStore",
    "LocalFileStore",
    "NotionConnector",
    "NotionDatastore",
    "NotioncacheAuthError",
    "NotioncacheConfig",
    "NotioncacheDocumentNotFoundError",
    "NotioncacheError",
    "NotioncacheFileStoreError",
    "NotioncacheHandlerNotSetError",
    "NotioncacheMappingError",
    "NotioncacheNetworkError",
    "NotioncacheNotFoundError",
    "NotioncachePermissionError",
    "NotioncacheRateLimitError",
    "NotioncacheRetryExhaustedError",
    "NotioncacheValidationError",
    "SQLiteDataCache",
    "build_application",
]

__version__ = "0.1.0"
