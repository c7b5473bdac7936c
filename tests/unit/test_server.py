"""Tests for the HTTP routes in notioncache.server."""

from __future__ import annotations

import httpx
import pytest

from notioncache.server import create_app

POST = {"id": "p1", "slug": "hello", "name": "Hello", "cover": None, "icon": None, "properties": {}, "blocks": []}


class StubClient:
    """Answers for database ``blog`` only."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    async def get_documents(self, database):
        self.calls.append(("list", database))
        return [POST] if database == "blog" else None

    async def get_document_by_slug(self, database, slug):
        self.calls.append(("slug", database, slug))
        return POST if (database, slug) == ("blog", "hello") else None

    async def get_document_by_id(self, database, document_id):
        self.calls.append(("id", database, document_id))
        return POST if (database, document_id) == ("blog", "p1") else None


@pytest.fixture
def stub() -> StubClient:
    return StubClient()


@pytest.fixture
async def http(stub, tmp_path):
    (tmp_path / "abc.txt").write_text("mirrored")
    app = create_app(stub, files_dir=tmp_path, files_url="/files")
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


class TestDocumentRoutes:
    async def test_list_documents(self, http):
        response = await http.get("/database/blog/documents")
        assert response.status_code == 200
        assert response.json() == [POST]

    async def test_by_slug(self, http, stub):
        response = await http.get("/database/blog/documents/bySlug/hello")
        assert response.status_code == 200
        assert response.json()["slug"] == "hello"
        assert stub.calls == [("slug", "blog", "hello")]

    async def test_by_id(self, http):
        response = await http.get("/database/blog/documents/byId/p1")
        assert response.status_code == 200
        assert response.json()["id"] == "p1"

    @pytest.mark.parametrize(
        "path",
        [
            "/database/nope/documents",
            "/database/blog/documents/bySlug/missing",
            "/database/blog/documents/byId/missing",
        ],
    )
    async def test_unknown_is_404(self, http, path):
        response = await http.get(path)
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]


class TestStaticFiles:
    async def test_mirrored_file_served(self, http):
        response = await http.get("/files/abc.txt")
        assert response.status_code == 200
        assert response.text == "mirrored"

    async def test_no_file_route_without_directory(self, stub):
        app = create_app(stub)
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/files/abc.txt")
        assert response.status_code == 404
