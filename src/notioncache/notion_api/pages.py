"""Page API wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from .transport import NotionTransport


class PageAPI:
    """Thin wrapper around ``/pages``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object (properties only, no content)."""
        return await self._transport.request("GET", f"/pages/{page_id}")
