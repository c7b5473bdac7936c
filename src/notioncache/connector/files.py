"""Route every remote file through the file-cache handler.

Notion-hosted file URLs expire after an hour, so the connector never
emits one directly.  It hands each URL to a handler that returns a URL
the application can serve (see
:func:`notioncache.datastore.build_file_cache_handler`) and wraps the
result in a :class:`~notioncache.models.File`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from notioncache.models.common import EmojiIcon, File, Icon, ImageIcon
from notioncache.observability import get_logger

log = get_logger("notioncache.connector")

FileCacheHandler = Callable[[str], Awaitable[str]]
"""``async (remote_url) -> servable_url``."""


def notion_file_url(raw: dict[str, Any]) -> str | None:
    """Extract the URL from a Notion file object (``external`` or ``file``)."""
    kind = raw.get("type")
    if kind == "external":
        return raw.get("external", {}).get("url")
    if kind == "file":
        return raw.get("file", {}).get("url")
    if kind == "custom_emoji":
        return raw.get("custom_emoji", {}).get("url")
    return None


class FileResolver:
    """Wrap a :data:`FileCacheHandler` so that display names survive.

    Parameters
    ----------
    handler:
        The bound file-cache handler.
    """

    def __init__(self, handler: FileCacheHandler) -> None:
        self._handler = handler

    async def resolve(self, url: str, name: str | None = None) -> File:
        """Pass *url* through the handler, keeping *name*."""
        return File(url=await self._handler(url), name=name)

    async def notion_file(self, raw: dict[str, Any], name: str | None = None) -> File | None:
        """Resolve a Notion file object; ``None`` if it carries no URL."""
        url = notion_file_url(raw)
        if url is None:
            log.warning(
                "File object without a URL",
                extra={"extra_fields": {"op": "resolve_file", "file_type": raw.get("type")}},
            )
            return None
        return await self.resolve(url, name if name is not None else raw.get("name"))

    async def notion_files(self, items: list[dict[str, Any]]) -> list[File]:
        """Resolve a ``files`` property value, one file at a time."""
        files: list[File] = []
        for item in items:
            resolved = await self.notion_file(item)
            if resolved is not None:
                files.append(resolved)
        return files

    async def icon(self, raw: dict[str, Any] | None) -> Icon | None:
        """Map a page, database or callout icon."""
        if not raw:
            return None
        if raw.get("type") == "emoji":
            return EmojiIcon(emoji=raw["emoji"])
        file = await self.notion_file(raw)
        return ImageIcon(file=file) if file is not None else None
