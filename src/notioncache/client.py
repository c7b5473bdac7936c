"""Read-only document client.

:class:`DocumentClient` is what an application reads cached documents
through.  It returns the public projection from
:mod:`notioncache.converter.projection` and answers ``None`` for any
unknown database or document instead of raising.

Usage::

    client = DocumentClient(datastore)
    posts = await client.get_documents("blog")
    post = await client.get_document_by_slug("blog", "kvb3a2mq-hello-world")
"""

from __future__ import annotations

from typing import Any

from notioncache.converter.projection import project_document
from notioncache.datastore import NotionDatastore
from notioncache.errors import NotioncacheNotFoundError
from notioncache.models.objects import ById, BySlug, canonical_id


class DocumentClient:
    """Project cached documents for readers.

    Parameters
    ----------
    datastore:
        The datastore whose cache is read.  Nothing is synced from here.
    """

    def __init__(self, datastore: NotionDatastore) -> None:
        self._query = datastore.query

    async def get_documents(self, database: str) -> list[dict[str, Any]] | None:
        """Every document of *database* (slug or id), or ``None`` if unknown."""
        try:
            documents = await self._query.documents_in_database(database)
        except NotioncacheNotFoundError:
            return None
        return [project_document(document) for document in documents]

    async def get_document_by_slug(self, database: str, slug: str) -> dict[str, Any] | None:
        try:
            document = await self._query.document(database, BySlug(slug=slug))
        except NotioncacheNotFoundError:
            return None
        return project_document(document) if document is not None else None

    async def get_document_by_id(self, database: str, document_id: str) -> dict[str, Any] | None:
        """A document by Notion id, provided it belongs to *database*."""
        cached_database = await self._query.database(database)
        if cached_database is None:
            return None
        document = await self._query.document(
            ById(id=cached_database.id), ById(id=canonical_id(document_id)),
        )
        if document is None or document.database_id != cached_database.id:
            return None
        return project_document(document)
