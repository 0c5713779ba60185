"""Tests for the listing page, static assets and health check."""
from sqlalchemy.exc import OperationalError

from filedrop.db.crud import files_crud


def test_index_page_lists_uploaded_files(client):
    empty_page = client.get("/")
    assert empty_page.status_code == 200
    assert "text/html" in empty_page.headers["content-type"]
    assert "No files yet." in empty_page.text

    contents = bytes(i % 255 for i in range(2_700))
    client.post("/file", files=[("file", ("movie.mp4", contents, "video/mp4"))])

    page = client.get("/")
    assert page.status_code == 200
    assert page.text != empty_page.text
    assert "movie.mp4" in page.text
    assert "2.7 kB" in page.text

    file_id = client.get("/api/files").json()["files"][0]["id"]
    assert f'href="/file/{file_id}"' in page.text
    assert f'action="/file/{file_id}/delete"' in page.text


def test_index_page_escapes_file_names(client):
    client.post("/file", files=[("file", ("<b>bold</b>.txt", b"x", "text/plain"))])

    page = client.get("/")

    assert "<b>bold</b>.txt" not in page.text
    assert "&lt;b&gt;bold&lt;/b&gt;.txt" in page.text


def test_index_page_survives_listing_failure(client, monkeypatch):
    async def failing_list(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(files_crud, "list_file_infos", failing_list)

    page = client.get("/")

    assert page.status_code == 200
    assert "No files yet." in page.text


def test_static_assets_are_served(client):
    response = client.get("/style.css")

    assert response.status_code == 200
    assert "color: black" in response.text


def test_unknown_path_is_not_found(client):
    assert client.get("/missing.js").status_code == 404


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
