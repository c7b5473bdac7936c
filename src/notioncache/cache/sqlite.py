"""SQLite-backed :class:`~notioncache.cache.base.DataCache`.

One ``aiosqlite`` connection is held open for the life of the cache.  All
writes are ``INSERT ... ON CONFLICT DO UPDATE`` upserts, so concurrent
writers of one key settle on the last write.  Nested values (block trees,
properties, schemas, icons, covers) are stored as JSON text produced by
pydantic.

Usage::

    async with SQLiteDataCache("notioncache.sqlite3") as cache:
        await cache.cache_users(users)
        user = await cache.query_user(user_id)
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import aiosqlite
from pydantic import TypeAdapter

from notioncache.errors import NotioncacheDocumentNotFoundError, NotioncacheNotFoundError
from notioncache.models.blocks import TopLevelBlock
from notioncache.models.common import File, Icon, UserReference
from notioncache.models.objects import (
    ById,
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
from notioncache.models.properties import DocumentProperty, PropertySchemaEntry, PropertyType
from notioncache.observability import get_logger

log = get_logger("notioncache.cache")

_BLOCKS = TypeAdapter(list[TopLevelBlock])
_PROPERTIES = TypeAdapter(list[DocumentProperty])
_SCHEMA = TypeAdapter(list[PropertySchemaEntry])
_FILE = TypeAdapter(Optional[File])
_ICON = TypeAdapter(Optional[Icon])

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS databases (
    id TEXT PRIMARY KEY,
    slug TEXT NOT NULL,
    name TEXT NOT NULL,
    notion_url TEXT NOT NULL,
    cover TEXT NOT NULL,
    icon TEXT NOT NULL,
    property_schema TEXT NOT NULL,
    last_synced_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_databases_slug ON databases(slug);

CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    slug TEXT NOT NULL,
    name TEXT NOT NULL,
    database_id TEXT NOT NULL,
    notion_url TEXT NOT NULL,
    cover TEXT NOT NULL,
    icon TEXT NOT NULL,
    properties TEXT NOT NULL,
    properties_last_synced_at TEXT NOT NULL,
    blocks TEXT NOT NULL DEFAULT '[]',
    text TEXT NOT NULL DEFAULT '',
    blocks_last_synced_at TEXT,
    notion_created_at TEXT NOT NULL,
    notion_updated_at TEXT NOT NULL,
    UNIQUE (database_id, slug)
);

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT,
    avatar TEXT NOT NULL,
    is_bot INTEGER NOT NULL,
    last_synced_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS files (
    url_key TEXT PRIMARY KEY,
    url TEXT NOT NULL,
    file_type TEXT NOT NULL,
    name TEXT,
    file_size_in_kb REAL NOT NULL,
    last_synced_at TEXT NOT NULL
);
"""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _json(adapter: TypeAdapter, value: Any) -> str:
    return adapter.dump_json(value).decode()


# ---------------------------------------------------------------------------
# Row -> model
# ---------------------------------------------------------------------------

def _database_from_row(row: aiosqlite.Row) -> Database:
    return Database(
        id=row["id"],
        slug=row["slug"],
        name=row["name"],
        notion_url=row["notion_url"],
        cover=_FILE.validate_json(row["cover"]),
        icon=_ICON.validate_json(row["icon"]),
        property_schema=_SCHEMA.validate_json(row["property_schema"]),
        last_synced_at=row["last_synced_at"],
    )


def _document_from_row(row: aiosqlite.Row) -> Document:
    return Document(
        id=row["id"],
        slug=row["slug"],
        name=row["name"],
        database_id=row["database_id"],
        notion_url=row["notion_url"],
        cover=_FILE.validate_json(row["cover"]),
        icon=_ICON.validate_json(row["icon"]),
        properties=_PROPERTIES.validate_json(row["properties"]),
        properties_last_synced_at=row["properties_last_synced_at"],
        blocks=_BLOCKS.validate_json(row["blocks"]),
        text=row["text"],
        blocks_last_synced_at=row["blocks_last_synced_at"],
        notion_created_at=row["notion_created_at"],
        notion_updated_at=row["notion_updated_at"],
    )


def _user_from_row(row: aiosqlite.Row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        avatar=_FILE.validate_json(row["avatar"]),
        is_bot=bool(row["is_bot"]),
        last_synced_at=row["last_synced_at"],
    )


def _file_from_row(row: aiosqlite.Row) -> CachedFile:
    return CachedFile(
        url_key=row["url_key"],
        url=row["url"],
        file_type=row["file_type"],
        name=row["name"],
        file_size_in_kb=row["file_size_in_kb"],
        last_synced_at=row["last_synced_at"],
    )


class SQLiteDataCache:
    """Cache databases, documents, users and file records in SQLite.

    Parameters
    ----------
    path:
        Database file, or ``":memory:"``.
    clock:
        Returns "now" as an aware datetime.  Every sync timestamp comes
        from here; tests inject a fixed or stepping clock.
    """

    def __init__(self, path: str | Path, clock: Callable[[], datetime] | None = None) -> None:
        self._path = str(path)
        self._clock = clock if clock is not None else _utc_now
        self._db: aiosqlite.Connection | None = None

    # -- lifecycle ---------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection and create missing tables."""
        if self._db is not None:
            return
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(_SCHEMA_SQL)
        await self._db.commit()
        log.debug("Cache opened", extra={"extra_fields": {"op": "connect", "path": self._path}})

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> SQLiteDataCache:
        await self.connect()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    @property
    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("SQLiteDataCache is not connected; call connect() first")
        return self._db

    def _now(self) -> str:
        return self._clock().isoformat()

    async def _fetch_one(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        async with self._conn.execute(sql, params) as cursor:
            return await cursor.fetchone()

    async def _fetch_all(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        async with self._conn.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def _fetch_written(self, table: str, key_column: str, key: str) -> aiosqlite.Row:
        """Read back the row an upsert just committed."""
        row = await self._fetch_one(f"SELECT * FROM {table} WHERE {key_column} = ?", (key,))
        if row is None:
            raise RuntimeError(f"{table} row {key!r} missing after write")
        return row

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    async def cache_database(self, database: RawDatabase) -> Database:
        await self._conn.execute(
            """
            INSERT INTO databases (id, slug, name, notion_url, cover, icon, property_schema, last_synced_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                slug = excluded.slug,
                name = excluded.name,
                notion_url = excluded.notion_url,
                cover = excluded.cover,
                icon = excluded.icon,
                property_schema = excluded.property_schema,
                last_synced_at = excluded.last_synced_at
            """,
            (
                database.notion_id,
                database.slug,
                database.name,
                database.url,
                _json(_FILE, database.cover),
                _json(_ICON, database.icon),
                _json(_SCHEMA, database.property_schema),
                self._now(),
            ),
        )
        await self._conn.commit()
        return await self._get_database(database.notion_id)

    async def cache_databases(self, databases: list[RawDatabase]) -> list[Database]:
        return [await self.cache_database(database) for database in databases]

    async def _get_database(self, database_id: str) -> Database:
        return _database_from_row(await self._fetch_written("databases", "id", database_id))

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def cache_document(self, document: RawDocument) -> Document:
        """Upsert a document's properties, leaving its block tree alone.

        ``people`` values are filled in from the users cached right now.
        """
        properties = await self._resolve_people(document.properties)
        await self._conn.execute(
            """
            INSERT INTO documents (
                id, slug, name, database_id, notion_url, cover, icon, properties,
                properties_last_synced_at, notion_created_at, notion_updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                slug = excluded.slug,
                name = excluded.name,
                database_id = excluded.database_id,
                notion_url = excluded.notion_url,
                cover = excluded.cover,
                icon = excluded.icon,
                properties = excluded.properties,
                properties_last_synced_at = excluded.properties_last_synced_at,
                notion_created_at = excluded.notion_created_at,
                notion_updated_at = excluded.notion_updated_at
            """,
            (
                document.notion_id,
                document.slug,
                document.name,
                document.notion_database_id,
                document.url,
                _json(_FILE, document.cover),
                _json(_ICON, document.icon),
                _json(_PROPERTIES, properties),
                self._now(),
                document.created_time,
                document.last_edited_time,
            ),
        )
        await self._conn.commit()
        return _document_from_row(await self._fetch_written("documents", "id", document.notion_id))

    async def cache_documents(self, documents: list[RawDocument]) -> list[Document]:
        return [await self.cache_document(document) for document in documents]

    async def cache_document_content(self, document_id: str, content: RawDocumentContent) -> Document:
        """Replace the block tree and text of a cached document.

        Raises
        ------
        NotioncacheDocumentNotFoundError
            If the document's properties were never cached.
        """
        cursor = await self._conn.execute(
            "UPDATE documents SET blocks = ?, text = ?, blocks_last_synced_at = ? WHERE id = ?",
            (_json(_BLOCKS, content.blocks), content.plain_text, self._now(), document_id),
        )
        updated = cursor.rowcount
        await cursor.close()
        await self._conn.commit()
        if updated == 0:
            raise NotioncacheDocumentNotFoundError(
                message=f"Cannot cache content for uncached document {document_id}",
                context={"document_id": document_id},
            )
        return _document_from_row(await self._fetch_written("documents", "id", document_id))

    def are_cached_document_blocks_stale(self, document: Document) -> bool:
        """True when the blocks were never synced or Notion has a newer edit."""
        if document.blocks_last_synced_at is None:
            return True
        return document.notion_updated_at > document.blocks_last_synced_at

    async def _resolve_people(self, properties: list[Any]) -> list[Any]:
        resolved: list[Any] = []
        for prop in properties:
            if prop.type == PropertyType.PEOPLE:
                people = [await self._resolve_person(person) for person in prop.value]
                prop = prop.model_copy(update={"value": people})
            resolved.append(prop)
        return resolved

    async def _resolve_person(self, person: UserReference) -> UserReference:
        user = await self.query_user(person.notion_id)
        if user is None:
            return person
        return UserReference(notion_id=person.notion_id, name=user.name, avatar=user.avatar, is_bot=user.is_bot)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def cache_user(self, user: RawUser) -> User:
        await self._conn.execute(
            """
            INSERT INTO users (id, name, avatar, is_bot, last_synced_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                avatar = excluded.avatar,
                is_bot = excluded.is_bot,
                last_synced_at = excluded.last_synced_at
            """,
            (user.notion_id, user.name, _json(_FILE, user.avatar), int(user.is_bot), self._now()),
        )
        await self._conn.commit()
        return _user_from_row(await self._fetch_written("users", "id", user.notion_id))

    async def cache_users(self, users: list[RawUser]) -> list[User]:
        return [await self.cache_user(user) for user in users]

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def record_cached_file(self, data: CachedFileData) -> CachedFile:
        """Record a mirrored file; an existing record for the key wins."""
        await self._conn.execute(
            """
            INSERT INTO files (url_key, url, file_type, name, file_size_in_kb, last_synced_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(url_key) DO NOTHING
            """,
            (data.url_key, data.url, data.file_type, data.name, data.file_size_in_kb, self._now()),
        )
        await self._conn.commit()
        return _file_from_row(await self._fetch_written("files", "url_key", data.url_key))

    async def is_file_cached(self, url_key: str) -> CachedFile | None:
        row = await self._fetch_one("SELECT * FROM files WHERE url_key = ?", (url_key,))
        return _file_from_row(row) if row is not None else None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query_databases(self) -> list[Database]:
        rows = await self._fetch_all("SELECT * FROM databases ORDER BY name, id")
        return [_database_from_row(row) for row in rows]

    async def query_database(self, database: ObjectRef) -> Database | None:
        if isinstance(database, ById):
            row = await self._fetch_one("SELECT * FROM databases WHERE id = ?", (database.id,))
        else:
            row = await self._fetch_one(
                "SELECT * FROM databases WHERE slug = ? ORDER BY id LIMIT 1", (database.slug,),
            )
        return _database_from_row(row) if row is not None else None

    async def query_document(self, document_id: str) -> Document | None:
        row = await self._fetch_one("SELECT * FROM documents WHERE id = ?", (document_id,))
        return _document_from_row(row) if row is not None else None

    async def query_document_in_database(
        self, database: ObjectRef, document: ObjectRef,
    ) -> Document | None:
        """Look up a document by id (anywhere) or by slug (within *database*).

        Raises
        ------
        NotioncacheNotFoundError
            If a slug lookup names a database that is not cached.
        """
        if isinstance(document, ById):
            return await self.query_document(document.id)
        cached_database = await self._require_database(database)
        row = await self._fetch_one(
            "SELECT * FROM documents WHERE database_id = ? AND slug = ?",
            (cached_database.id, document.slug),
        )
        return _document_from_row(row) if row is not None else None

    async def query_documents_by_database(self, database: ObjectRef) -> list[Document]:
        """Every cached document of *database*, by name.

        Raises
        ------
        NotioncacheNotFoundError
            If the database is not cached.
        """
        cached_database = await self._require_database(database)
        rows = await self._fetch_all(
            "SELECT * FROM documents WHERE database_id = ? ORDER BY name, id", (cached_database.id,),
        )
        return [_document_from_row(row) for row in rows]

    async def query_user(self, user_id: str) -> User | None:
        row = await self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        return _user_from_row(row) if row is not None else None

    async def _require_database(self, database: ObjectRef) -> Database:
        cached = await self.query_database(database)
        if cached is None:
            raise NotioncacheNotFoundError(
                message=f"Database {database!r} is not cached",
                context={"database": database.model_dump()},
            )
        return cached
