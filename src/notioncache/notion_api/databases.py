"""Database API wrapper for the Notion API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from .transport import NotionTransport


class DatabaseAPI:
    """Thin wrapper around ``/databases``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, database_id: str) -> dict[str, Any]:
        """Retrieve a database object, including its property schema."""
        return await self._transport.request("GET", f"/databases/{database_id}")

    def query(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield every row of ``POST /databases/{id}/query`` across all pages.

        Rows are usually pages but may be other objects; callers filter.
        """
        body: dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        return self._transport.paginate("POST", f"/databases/{database_id}/query", json=body)
