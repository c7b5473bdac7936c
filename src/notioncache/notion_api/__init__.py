"""notioncache.notion_api -- Notion API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Token bucket rate limiter.
* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, pacing and pagination.
* :mod:`.pages`, :mod:`.blocks`, :mod:`.databases`, :mod:`.users`,
  :mod:`.search` -- endpoint wrappers.
"""

from __future__ import annotations

from .blocks import BlockAPI
from .databases import DatabaseAPI
from .pages import PageAPI
from .rate_limit import AsyncTokenBucket
from .retries import compute_backoff, parse_retry_after, should_retry
from .search import DATABASE_FILTER, SearchAPI
from .transport import NotionTransport
from .users import UserAPI

__all__ = [
    "AsyncTokenBucket",
    "BlockAPI",
    "DATABASE_FILTER",
    "DatabaseAPI",
    "NotionTransport",
    "PageAPI",
    "SearchAPI",
    "UserAPI",
    "compute_backoff",
    "parse_retry_after",
    "should_retry",
]
