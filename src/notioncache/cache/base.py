"""Protocol every local cache satisfies.

The datastore only ever talks to a :class:`DataCache`; the one concrete
implementation is :class:`~notioncache.cache.sqlite.SQLiteDataCache`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from notioncache.models.objects import (
    CachedFile,
    CachedFileData,
    Database,
    Document,
    ObjectRef,
    RawDatabase,
    RawDocument,
    RawDocumentContent,
    RawUser,
    User,
)


@runtime_checkable
class DataCache(Protocol):
    """Local store of databases, documents, users and mirrored files.

    Every ``cache_*`` method is an idempotent upsert keyed by the remote
    id.  Read methods return ``None`` for an unknown id or slug, except
    where they need a database to exist first.
    """

    async def cache_database(self, database: RawDatabase) -> Database: ...

    async def cache_databases(self, databases: list[RawDatabase]) -> list[Database]: ...

    async def cache_document(self, document: RawDocument) -> Document: ...

    async def cache_documents(self, documents: list[RawDocument]) -> list[Document]: ...

    async def cache_document_content(self, document_id: str, content: RawDocumentContent) -> Document: ...

    async def cache_user(self, user: RawUser) -> User: ...

    async def cache_users(self, users: list[RawUser]) -> list[User]: ...

    def are_cached_document_blocks_stale(self, document: Document) -> bool: ...

    async def record_cached_file(self, data: CachedFileData) -> CachedFile: ...

    async def is_file_cached(self, url_key: str) -> CachedFile | None: ...

    async def query_databases(self) -> list[Database]: ...

    async def query_database(self, database: ObjectRef) -> Database | None: ...

    async def query_document_in_database(
        self, database: ObjectRef, document: ObjectRef,
    ) -> Document | None: ...

    async def query_documents_by_database(self, database: ObjectRef) -> list[Document]: ...

    async def query_user(self, user_id: str) -> User | None: ...
