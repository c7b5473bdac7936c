"""User API wrapper for the Notion API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from .transport import NotionTransport


class UserAPI:
    """Thin wrapper around ``/users``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def list(self) -> AsyncIterator[dict[str, Any]]:
        """Yield every user (people and bots) in the workspace."""
        return self._transport.paginate("GET", "/users")
