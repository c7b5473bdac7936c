"""notioncache.cache -- local store of synced Notion data."""

from __future__ import annotations

from .base import DataCache
from .sqlite import SQLiteDataCache

__all__ = ["DataCache", "SQLiteDataCache"]
