"""HTTP facade over :class:`~notioncache.client.DocumentClient`.

Routes::

    GET /database/{database}/documents
    GET /database/{database}/documents/bySlug/{slug}
    GET /database/{database}/documents/byId/{document_id}

An unknown database or document answers ``404``.  When a file directory
is given, mirrored files are served from it as static files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from fastapi import FastAPI, HTTPException
from fastapi.staticfiles import StaticFiles

from notioncache.client import DocumentClient


def _found(value: Any, detail: str) -> Any:
    if value is None:
        raise HTTPException(status_code=404, detail=detail)
    return value


def files_mount_path(public_base_url: str) -> str:
    """Route prefix for mirrored files given their public URL prefix.

    The public prefix may be absolute (a CDN or reverse proxy in front of
    this server); only its path is routed here.

    >>> files_mount_path("https://cdn.example.com/files/")
    '/files'
    """
    path = urlsplit(public_base_url).path.rstrip("/")
    if not path:
        return "/files"
    return path if path.startswith("/") else "/" + path


def create_app(
    client: DocumentClient,
    files_dir: str | Path | None = None,
    files_url: str = "/files",
) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    ----------
    client:
        Where documents are read from.
    files_dir:
        Directory of mirrored files to serve under *files_url*; no files
        are served when omitted.
    files_url:
        URL prefix for mirrored files.
    """
    app = FastAPI(title="notioncache")

    @app.get("/database/{database}/documents")
    async def list_documents(database: str) -> list[dict[str, Any]]:
        return _found(await client.get_documents(database), f"Database '{database}' not found")

    @app.get("/database/{database}/documents/bySlug/{slug}")
    async def document_by_slug(database: str, slug: str) -> dict[str, Any]:
        return _found(
            await client.get_document_by_slug(database, slug),
            f"Document '{slug}' not found in '{database}'",
        )

    @app.get("/database/{database}/documents/byId/{document_id}")
    async def document_by_id(database: str, document_id: str) -> dict[str, Any]:
        return _found(
            await client.get_document_by_id(database, document_id),
            f"Document '{document_id}' not found in '{database}'",
        )

    if files_dir is not None:
        app.mount(files_url, StaticFiles(directory=str(files_dir), check_dir=False), name="files")

    return app
