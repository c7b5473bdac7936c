"""notioncache.filestore -- mirroring remote files.

Notion-hosted file URLs expire, so every file a document references is
copied somewhere stable.  :func:`~notioncache.utils.hashing.url_key` gives
the lookup key the copy is recorded under.
"""

from __future__ import annotations

from notioncache.utils.hashing import url_key

from .base import FileStore
from .local import LocalFileStore, guess_mime_from_url, sniff_mime

__all__ = ["FileStore", "LocalFileStore", "guess_mime_from_url", "sniff_mime", "url_key"]
