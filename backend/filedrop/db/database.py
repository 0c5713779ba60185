import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, StaticPool

from ..config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _normalize_sqlite_url(url: str) -> str:
    if url.startswith("sqlite://") and not url.startswith("sqlite+aiosqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _is_memory_url(url: str) -> bool:
    return url.endswith(":memory:") or url.rstrip("/").endswith("sqlite+aiosqlite:")


def create_engine_for(url: str) -> AsyncEngine:
    """Create the async engine (connection pool) for ``url``."""
    url = _normalize_sqlite_url(url)
    if not url.startswith("sqlite+aiosqlite://"):
        raise ValueError(f"Unsupported DATABASE_URL {url!r}, expected a sqlite URL")
    in_memory = _is_memory_url(url)

    # An in-memory database lives inside one connection, so all sessions share it
    engine = create_async_engine(
        url,
        poolclass=StaticPool if in_memory else NullPool,
        connect_args={"check_same_thread": False, "timeout": settings.DB_BUSY_TIMEOUT_SECONDS},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            # WAL lets readers proceed while a writer is in progress
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL;")
        finally:
            cursor.close()

    logger.info("Using SQLite database at %s", url)
    return engine


class DatabaseHandle:
    """
    Shared handle to the storage engine.

    One instance is created per application by the lifespan and kept on
    ``app.state.db``; every request borrows sessions from it.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: AsyncEngine = create_engine_for(url)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_schema(self) -> None:
        # Import models so they are registered on Base.metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_handle(request: Request) -> DatabaseHandle:
    handle: Optional[DatabaseHandle] = getattr(request.app.state, "db", None)
    if handle is None:
        raise RuntimeError("Database handle not initialized")
    return handle


# FastAPI dependency
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session = get_handle(request).session_factory()
    try:
        yield session
    finally:
        await session.close()
