"""notioncache.connector -- Notion API to canonical model.

* :mod:`.connector` -- :class:`NotionConnector`, the fetch operations.
* :mod:`.blocks` -- remote block kinds and content mapping.
* :mod:`.properties` -- page properties and database schemas.
* :mod:`.slugs` -- slugs, id compression and ``$`` directives.
* :mod:`.files` -- routing remote files through the file-cache handler.
"""

from __future__ import annotations

from .blocks import REMOTE_BLOCK_TYPES, BlockContentMapper
from .connector import NotionConnector
from .files import FileCacheHandler, FileResolver, notion_file_url
from .properties import PropertyMapper, map_schema
from .slugs import compress_object_id, database_slug, document_slug

__all__ = [
    "REMOTE_BLOCK_TYPES",
    "BlockContentMapper",
    "FileCacheHandler",
    "FileResolver",
    "NotionConnector",
    "PropertyMapper",
    "compress_object_id",
    "database_slug",
    "document_slug",
    "map_schema",
    "notion_file_url",
]
