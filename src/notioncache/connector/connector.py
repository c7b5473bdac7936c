"""Notion API to canonical model.

:class:`NotionConnector` is the only component that reads from Notion.  It
never touches the local cache; the datastore decides what to keep.

Every fetch resolves file URLs through a file-cache handler, so one must
be bound with :meth:`NotionConnector.set_file_cache_handler` before any
fetch.  Fetching without one raises :class:`NotioncacheHandlerNotSetError`.

Block children are fetched a page at a time.  Within a page, runs of
consecutive list items of one kind are folded into a virtual list block;
a run split across two pages is merged back into a single virtual list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from notioncache.converter.plain_text import get_plain_text
from notioncache.errors import NotioncacheHandlerNotSetError, NotioncacheMappingError
from notioncache.models.blocks import (
    BLOCK_MODELS,
    CONTAINER_BLOCK_TYPES,
    LIST_AGGREGATES,
    is_aggregate_block,
)
from notioncache.models.objects import RawDatabase, RawDocument, RawDocumentContent, RawUser
from notioncache.notion_api import (
    DATABASE_FILTER,
    BlockAPI,
    DatabaseAPI,
    NotionTransport,
    PageAPI,
    SearchAPI,
    UserAPI,
)
from notioncache.observability import MetricsHook, NoopMetricsHook, get_logger

from .blocks import CONTENTLESS_BLOCK_TYPES, REMOTE_BLOCK_TYPES, BlockContentMapper
from .files import FileCacheHandler, FileResolver
from .properties import PropertyMapper, map_schema
from .slugs import database_slug, document_slug, title_of

log = get_logger("notioncache.connector")


@dataclass(frozen=True)
class _Mappers:
    files: FileResolver
    properties: PropertyMapper
    content: BlockContentMapper


def _plain_title(rich_text: list[dict[str, Any]] | None) -> str:
    return "".join(item.get("plain_text", "") for item in rich_text or [])


class NotionConnector:
    """Fetch databases, documents, block trees and users from Notion.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport`.
    metrics:
        Optional metrics hook; dropped blocks are counted here.
    """

    def __init__(self, transport: NotionTransport, metrics: MetricsHook | None = None) -> None:
        self._pages = PageAPI(transport)
        self._blocks = BlockAPI(transport)
        self._databases = DatabaseAPI(transport)
        self._users = UserAPI(transport)
        self._search = SearchAPI(transport)
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

        self._mappers: _Mappers | None = None

    def set_file_cache_handler(self, handler: FileCacheHandler) -> None:
        """Bind the handler every remote file URL is routed through."""
        files = FileResolver(handler)
        self._mappers = _Mappers(files, PropertyMapper(files), BlockContentMapper(files))

    def _require_handler(self, op: str) -> _Mappers:
        if self._mappers is None:
            raise NotioncacheHandlerNotSetError(
                message=f"No file cache handler bound before {op}",
                context={"op": op},
            )
        return self._mappers

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------

    async def get_connected_databases(self) -> list[RawDatabase]:
        """Every database shared with the integration, with its schema.

        Only the first page of search results is read, so a workspace
        sharing 100 or more databases is truncated.
        """
        self._require_handler("get_connected_databases")
        results = await self._search.search(filter=DATABASE_FILTER)
        databases: list[RawDatabase] = []
        for raw in results:
            if raw.get("object") != "database":
                continue
            databases.append(await self._map_database(raw, with_schema=True))
        return databases

    async def get_database(self, database_id: str) -> RawDatabase:
        """A single database.  Its property schema is left empty."""
        self._require_handler("get_database")
        raw = await self._databases.retrieve(database_id)
        return await self._map_database(raw, with_schema=False)

    async def _map_database(self, raw: dict[str, Any], *, with_schema: bool) -> RawDatabase:
        files = self._require_handler("map_database").files
        name = _plain_title(raw.get("title"))
        return RawDatabase(
            notion_id=raw["id"],
            slug=database_slug(name),
            name=name,
            url=raw.get("url", ""),
            cover=await self._cover(raw.get("cover")),
            icon=await files.icon(raw.get("icon")),
            property_schema=map_schema(raw.get("properties") or {}) if with_schema else [],
            created_time=raw["created_time"],
            last_edited_time=raw["last_edited_time"],
        )

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def get_documents_in_database(self, database_id: str) -> list[RawDocument]:
        """Every page of a database, without block content."""
        self._require_handler("get_documents_in_database")
        documents: list[RawDocument] = []
        async for raw in self._databases.query(database_id):
            if raw.get("object") != "page":
                continue
            documents.append(await self._map_page(raw))
        return documents

    async def get_document(self, document_id: str) -> RawDocument:
        self._require_handler("get_document")
        return await self._map_page(await self._pages.retrieve(document_id))

    async def get_document_content(self, document_id: str) -> RawDocumentContent:
        """The full block tree of a page and its plain text."""
        self._require_handler("get_document_content")
        blocks = await self.get_child_blocks(document_id)
        return RawDocumentContent(blocks=blocks, plain_text=get_plain_text(blocks))

    async def _map_page(self, raw: dict[str, Any]) -> RawDocument:
        mappers = self._require_handler("map_page")
        properties = raw.get("properties") or {}
        parent = raw.get("parent") or {}
        return RawDocument(
            notion_id=raw["id"],
            notion_database_id=parent.get("database_id", ""),
            slug=document_slug(raw["id"], properties),
            name=title_of(properties),
            url=raw.get("url", ""),
            cover=await self._cover(raw.get("cover")),
            icon=await mappers.files.icon(raw.get("icon")),
            properties=await mappers.properties.map_properties(properties),
            created_time=raw["created_time"],
            last_edited_time=raw["last_edited_time"],
        )

    async def _cover(self, raw: dict[str, Any] | None):
        if not raw:
            return None
        return await self._require_handler("map_cover").files.notion_file(raw)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_users(self) -> list[RawUser]:
        """Every person and bot in the workspace."""
        files = self._require_handler("get_users").files
        users: list[RawUser] = []
        async for raw in self._users.list():
            avatar_url = raw.get("avatar_url")
            users.append(RawUser(
                notion_id=raw["id"],
                name=raw.get("name"),
                avatar=await files.resolve(avatar_url) if avatar_url else None,
                is_bot=raw.get("type") == "bot",
            ))
        return users

    # ------------------------------------------------------------------
    # Block tree
    # ------------------------------------------------------------------

    async def get_child_blocks(self, block_id: str) -> list[BaseModel]:
        """Canonical children of a page or block, recursively.

        A list run that continues from one page of results into the next
        is appended to the virtual list already emitted for it.
        """
        self._require_handler("get_child_blocks")
        blocks: list[BaseModel] = []
        # Remote kind of the previous page's last block; a dropped block ends a run.
        previous_kind: str | None = None
        async for page in self._blocks.iter_children_pages(block_id):
            results = page.get("results", [])
            mapped = await self._map_block_page(results)
            if (
                mapped
                and blocks
                and results[0].get("type") == previous_kind
                and is_aggregate_block(blocks[-1])
                and blocks[-1].type == mapped[0].type
            ):
                blocks[-1].children.extend(mapped.pop(0).children)
            blocks.extend(mapped)
            if results:
                previous_kind = results[-1].get("type")
        return blocks

    async def _map_block_page(self, raw_blocks: list[dict[str, Any]]) -> list[BaseModel]:
        mapped: list[BaseModel] = []
        i = 0
        while i < len(raw_blocks):
            kind = raw_blocks[i].get("type")
            if REMOTE_BLOCK_TYPES.get(kind) in LIST_AGGREGATES:
                end = i + 1
                while end < len(raw_blocks) and raw_blocks[end].get("type") == kind:
                    end += 1
                mapped.append(await self._build_aggregate(raw_blocks[i:end]))
                i = end
                continue
            block = await self._build_block(raw_blocks[i])
            if block is not None:
                mapped.append(block)
            i += 1
        return mapped

    async def _build_aggregate(self, run: list[dict[str, Any]]) -> BaseModel:
        """Fold a run of list items of one kind into a virtual list."""
        first = run[0]
        item_type = REMOTE_BLOCK_TYPES.get(first.get("type"))
        aggregate_type = LIST_AGGREGATES.get(item_type)
        if aggregate_type is None:
            raise NotioncacheMappingError(
                message=f"Cannot build a list from block type {first.get('type')!r}",
                context={"block_id": first.get("id"), "block_type": first.get("type")},
            )
        items: list[BaseModel] = []
        for raw in run:
            item = await self._build_block(raw)
            if item is not None:
                items.append(item)
        return BLOCK_MODELS[aggregate_type](id=f"virtual-{first['id']}", children=items)

    async def _build_block(self, raw: dict[str, Any]) -> BaseModel | None:
        content_mapper = self._require_handler("map_block").content
        kind = raw.get("type")
        block_type = REMOTE_BLOCK_TYPES.get(kind)
        if block_type is None:
            self._drop_block(raw, "unsupported block type")
            return None

        fields: dict[str, Any] = {"id": raw["id"]}
        content = await content_mapper.map_content(raw)
        if content is not None:
            fields["content"] = content
        elif kind not in CONTENTLESS_BLOCK_TYPES:
            self._drop_block(raw, "block content could not be mapped")
            return None
        if block_type in CONTAINER_BLOCK_TYPES:
            fields["children"] = await self.get_child_blocks(raw["id"]) if raw.get("has_children") else []
        return BLOCK_MODELS[block_type](**fields)

    def _drop_block(self, raw: dict[str, Any], reason: str) -> None:
        kind = raw.get("type")
        self._metrics.increment("notioncache.blocks_dropped_total", tags={"block_type": str(kind)})
        log.warning(
            "Dropping block",
            extra={"extra_fields": {
                "op": "map_block",
                "block_id": raw.get("id"),
                "block_type": kind,
                "reason": reason,
            }},
        )
