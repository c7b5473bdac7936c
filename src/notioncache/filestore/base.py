"""Protocol for stores that mirror remote files."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from notioncache.models.objects import CachedFileData


@runtime_checkable
class FileStore(Protocol):
    """Mirror one remote file and report where it is now served from."""

    async def cache_file(self, url_key: str, url: str) -> CachedFileData: ...
