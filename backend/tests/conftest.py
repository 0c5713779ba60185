"""Shared fixtures for the file drop tests."""
from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from filedrop.db.database import DatabaseHandle
from filedrop.main import create_app

BOUNDARY = "ABCDEFGHIJKLMNOPQRSTUVXYZ"
MAX_UPLOAD_SIZE = 10 * 1000 * 1000


def multipart_body(
    parts: List[Tuple[str, Optional[str], Optional[str], bytes]],
    boundary: str = BOUNDARY,
    close: bool = True,
) -> bytes:
    """Build a multipart body by hand.

    Each part is ``(field_name, filename, content_type, contents)``; a
    ``None`` filename or content type leaves that header parameter out.
    """
    data = bytearray()
    for name, filename, content_type, contents in parts:
        data += f"--{boundary}\r\n".encode()
        disposition = f'Content-Disposition: form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        data += disposition.encode("utf-8") + b"\r\n"
        if content_type is not None:
            data += f"Content-Type: {content_type}\r\n".encode()
        data += b"\r\n"
        data += contents
        data += b"\r\n"
    if close:
        data += f"--{boundary}--\r\n".encode()
    return bytes(data)


def multipart_headers(boundary: str = BOUNDARY) -> dict:
    return {"content-type": f'multipart/form-data; boundary="{boundary}"'}


@pytest.fixture
def assets_dir(tmp_path):
    """Static assets directory with a single stylesheet."""
    directory = tmp_path / "assets"
    directory.mkdir()
    (directory / "style.css").write_text("body { color: black; }\n")
    return directory


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'filedrop.db'}"


def _make_client(database_url, assets_dir, max_upload_size):
    app = create_app(
        database_url=database_url,
        max_upload_size=max_upload_size,
        assets_dir=str(assets_dir),
    )
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def client(database_url, assets_dir):
    """Test client backed by a fresh SQLite file.

    Yields:
        TestClient with the application lifespan running.
    """
    with _make_client(database_url, assets_dir, MAX_UPLOAD_SIZE) as test_client:
        yield test_client


@pytest.fixture
def small_client(database_url, assets_dir):
    """Test client whose upload limit is 1000 bytes."""
    with _make_client(database_url, assets_dir, 1000) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def db():
    """Session on a fresh in-memory database.

    Yields:
        AsyncSession with the schema created.
    """
    handle = DatabaseHandle("sqlite+aiosqlite:///:memory:")
    await handle.create_schema()
    async with handle.session_factory() as session:
        yield session
    await handle.dispose()
