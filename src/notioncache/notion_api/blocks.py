"""Block API wrapper for the Notion API.

Block children are exposed one *page* at a time rather than flattened:
the connector folds list-item runs page by page and needs to see where
one page ends and the next begins.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from .transport import NotionTransport


class BlockAPI:
    """Thin wrapper around ``/blocks``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def iter_children_pages(self, block_id: str) -> AsyncIterator[dict[str, Any]]:
        """Yield each page of ``GET /blocks/{id}/children``.

        Parameters
        ----------
        block_id:
            A block or page id; pages are blocks whose children are the
            page content.

        Yields
        ------
        dict
            A list response with ``results``, ``has_more`` and
            ``next_cursor``.
        """
        return self._transport.iter_pages("GET", f"/blocks/{block_id}/children")
