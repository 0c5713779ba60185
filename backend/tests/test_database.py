"""Tests for engine creation and the request-scoped database handle."""
import pytest
from sqlalchemy import text

from filedrop.config import settings
from filedrop.db.database import DatabaseHandle, create_engine_for


def test_non_sqlite_url_is_rejected():
    with pytest.raises(ValueError):
        create_engine_for("postgresql+asyncpg://user@localhost/files")


def test_max_upload_size_uses_decimal_megabytes():
    assert settings.max_upload_size(10) == 10_000_000
    assert settings.max_upload_size(0) == 0


async def test_file_database_uses_wal(tmp_path):
    handle = DatabaseHandle(f"sqlite:///{tmp_path / 'wal.db'}")
    try:
        await handle.create_schema()
        async with handle.engine.connect() as conn:
            mode = (await conn.execute(text("PRAGMA journal_mode"))).scalar()
        assert mode == "wal"
    finally:
        await handle.dispose()


async def test_memory_database_is_shared_between_sessions():
    handle = DatabaseHandle("sqlite+aiosqlite:///:memory:")
    try:
        await handle.create_schema()
        async with handle.session_factory() as first:
            await first.execute(text("INSERT INTO file (name, data) VALUES ('a', x'00')"))
            await first.commit()
        async with handle.session_factory() as second:
            count = (await second.execute(text("SELECT count(*) FROM file"))).scalar()
        assert count == 1
    finally:
        await handle.dispose()


def test_invalid_integer_setting_names_the_variable(monkeypatch):
    monkeypatch.setenv("DB_BUSY_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ValueError, match="DB_BUSY_TIMEOUT_SECONDS"):
        settings._int_env("DB_BUSY_TIMEOUT_SECONDS", "15")
