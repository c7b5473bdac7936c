"""Search API wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from .transport import NotionTransport

DATABASE_FILTER: dict[str, str] = {"property": "object", "value": "database"}
"""Search filter restricting results to databases."""


class SearchAPI:
    """Thin wrapper around ``/search``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    async def search(
        self,
        filter: dict[str, Any] | None = None,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return the first page of search results.

        Only a single page is fetched.  Callers that search for databases
        rely on a workspace sharing fewer than 100 of them with the
        integration.
        """
        body: dict[str, Any] = {"page_size": 100}
        if filter is not None:
            body["filter"] = filter
        if query is not None:
            body["query"] = query
        data = await self._transport.request("POST", "/search", json=body)
        return data.get("results", [])
