"""Notion block objects to canonical block content.

:data:`REMOTE_BLOCK_TYPES` names every remote kind this system keeps.
Anything else, including Notion's own ``unsupported`` kind, is dropped by
the connector with a warning.  :class:`BlockContentMapper` builds the
content model for one remote block; children are the connector's job.
"""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable as _Callable
from typing import Any

from pydantic import BaseModel

from notioncache.converter.rich_text import map_color, map_rich_text
from notioncache.models import blocks as b
from notioncache.models.blocks import BlockType
from notioncache.models.common import ObjectType
from notioncache.observability import get_logger

from .files import FileResolver

log = get_logger("notioncache.connector")

REMOTE_BLOCK_TYPES: dict[str, BlockType] = {
    "paragraph": BlockType.PARAGRAPH,
    "heading_1": BlockType.HEADING_1,
    "heading_2": BlockType.HEADING_2,
    "heading_3": BlockType.HEADING_3,
    "bulleted_list_item": BlockType.BULLETED_LIST_ITEM,
    "numbered_list_item": BlockType.NUMBERED_LIST_ITEM,
    "to_do": BlockType.TO_DO_LIST_ITEM,
    "quote": BlockType.QUOTE,
    "toggle": BlockType.TOGGLE,
    "template": BlockType.TEMPLATE,
    "synced_block": BlockType.SYNCED_BLOCK,
    "child_page": BlockType.CHILD_PAGE,
    "child_database": BlockType.CHILD_DATABASE,
    "equation": BlockType.EQUATION,
    "code": BlockType.CODE,
    "callout": BlockType.CALLOUT,
    "divider": BlockType.DIVIDER,
    "breadcrumb": BlockType.BREADCRUMB,
    "table_of_contents": BlockType.TABLE_OF_CONTENTS,
    "column_list": BlockType.COLUMN_LIST,
    "column": BlockType.COLUMN,
    "link_to_page": BlockType.LINK_TO_PAGE,
    "table": BlockType.TABLE,
    "table_row": BlockType.TABLE_ROW,
    "embed": BlockType.EMBED,
    "bookmark": BlockType.BOOKMARK,
    "image": BlockType.IMAGE,
    "video": BlockType.VIDEO,
    "pdf": BlockType.PDF,
    "file": BlockType.FILE,
    "audio": BlockType.AUDIO,
    "link_preview": BlockType.LINK_PREVIEW,
}

# Remote kinds that carry no content.
CONTENTLESS_BLOCK_TYPES: frozenset[str] = frozenset({
    "divider",
    "breadcrumb",
    "column_list",
    "column",
})

_LINK_TARGETS: dict[str, ObjectType] = {
    "page_id": ObjectType.PAGE,
    "database_id": ObjectType.DATABASE,
    "comment_id": ObjectType.COMMENT,
}


class BlockContentMapper:
    """Build the content model of a single remote block.

    Parameters
    ----------
    files:
        Resolver for media blocks and callout icons.
    """

    def __init__(self, files: FileResolver) -> None:
        self._files = files

    async def map_content(self, raw: dict[str, Any]) -> BaseModel | None:
        """Content for *raw*.

        ``None`` for kinds without content, and for media blocks whose file
        object carries no URL.
        """
        kind = raw["type"]
        if kind in CONTENTLESS_BLOCK_TYPES:
            return None
        return await _CONTENT_MAPPERS[kind](self, raw.get(kind) or {})

    # ------------------------------------------------------------------
    # Per-kind mappers (receive the kind-specific payload)
    # ------------------------------------------------------------------

    async def _text(self, data: dict) -> BaseModel:
        return b.TextContent(rich_text=map_rich_text(data.get("rich_text")), color=map_color(data.get("color")))

    async def _heading(self, data: dict) -> BaseModel:
        return b.HeadingContent(
            rich_text=map_rich_text(data.get("rich_text")),
            color=map_color(data.get("color")),
            is_toggleable=bool(data.get("is_toggleable")),
        )

    async def _to_do(self, data: dict) -> BaseModel:
        return b.ToDoContent(
            rich_text=map_rich_text(data.get("rich_text")),
            color=map_color(data.get("color")),
            checked=bool(data.get("checked")),
        )

    async def _template(self, data: dict) -> BaseModel:
        return b.TemplateContent(rich_text=map_rich_text(data.get("rich_text")))

    async def _synced_block(self, data: dict) -> BaseModel:
        synced_from = data.get("synced_from") or {}
        return b.SyncedBlockContent(block_id=synced_from.get("block_id"))

    async def _child_title(self, data: dict) -> BaseModel:
        return b.ChildTitleContent(title=data.get("title", ""))

    async def _equation(self, data: dict) -> BaseModel:
        return b.EquationContent(expression=data.get("expression", ""))

    async def _code(self, data: dict) -> BaseModel:
        return b.CodeContent(
            rich_text=map_rich_text(data.get("rich_text")),
            caption=map_rich_text(data.get("caption")),
            language=data.get("language", "plain text"),
        )

    async def _callout(self, data: dict) -> BaseModel:
        return b.CalloutContent(
            rich_text=map_rich_text(data.get("rich_text")),
            color=map_color(data.get("color")),
            icon=await self._files.icon(data.get("icon")),
        )

    async def _table_of_contents(self, data: dict) -> BaseModel:
        return b.TableOfContentsContent(color=map_color(data.get("color")))

    async def _link_to_page(self, data: dict) -> BaseModel:
        target = data.get("type", "page_id")
        return b.LinkToPageContent(type=_LINK_TARGETS.get(target, ObjectType.PAGE), id=data[target])

    async def _table(self, data: dict) -> BaseModel:
        return b.TableContent(
            has_column_header=bool(data.get("has_column_header")),
            has_row_header=bool(data.get("has_row_header")),
            table_width=data.get("table_width", 0),
        )

    async def _table_row(self, data: dict) -> BaseModel:
        return b.TableRowContent(cells=[map_rich_text(cell) for cell in data.get("cells") or []])

    async def _url_caption(self, data: dict) -> BaseModel:
        return b.UrlCaptionContent(url=data.get("url", ""), caption=map_rich_text(data.get("caption")))

    async def _media(self, data: dict) -> BaseModel | None:
        file = await self._files.notion_file(data)
        if file is None:
            return None
        return b.MediaContent(file=file, caption=map_rich_text(data.get("caption")))

    async def _link_preview(self, data: dict) -> BaseModel:
        return b.LinkPreviewContent(url=data.get("url", ""))


# ------------------------------------------------------------------
# Content mapper dispatch table
# ------------------------------------------------------------------

_ContentMapper = _Callable[["BlockContentMapper", dict], Awaitable[BaseModel | None]]

_CONTENT_MAPPERS: dict[str, _ContentMapper] = {
    "paragraph": BlockContentMapper._text,
    "heading_1": BlockContentMapper._heading,
    "heading_2": BlockContentMapper._heading,
    "heading_3": BlockContentMapper._heading,
    "bulleted_list_item": BlockContentMapper._text,
    "numbered_list_item": BlockContentMapper._text,
    "to_do": BlockContentMapper._to_do,
    "quote": BlockContentMapper._text,
    "toggle": BlockContentMapper._text,
    "template": BlockContentMapper._template,
    "synced_block": BlockContentMapper._synced_block,
    "child_page": BlockContentMapper._child_title,
    "child_database": BlockContentMapper._child_title,
    "equation": BlockContentMapper._equation,
    "code": BlockContentMapper._code,
    "callout": BlockContentMapper._callout,
    "table_of_contents": BlockContentMapper._table_of_contents,
    "link_to_page": BlockContentMapper._link_to_page,
    "table": BlockContentMapper._table,
    "table_row": BlockContentMapper._table_row,
    "embed": BlockContentMapper._url_caption,
    "bookmark": BlockContentMapper._url_caption,
    "image": BlockContentMapper._media,
    "video": BlockContentMapper._media,
    "pdf": BlockContentMapper._media,
    "file": BlockContentMapper._media,
    "audio": BlockContentMapper._media,
    "link_preview": BlockContentMapper._link_preview,
}
