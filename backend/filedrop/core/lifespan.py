import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..db.database import DatabaseHandle


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database handle on startup and close it on shutdown."""
    logger.info("Starting application...")

    handle = DatabaseHandle(app.state.database_url)
    try:
        await handle.create_schema()
        logger.info("✅ Database tables created/verified")
        app.state.db = handle

        yield
    except Exception as e:  # noqa: BLE001
        logger.error("Error during startup: %s", e, exc_info=True)
        raise
    finally:
        logger.info("Shutting down application...")
        app.state.db = None
        await handle.dispose()
        logger.info("Application shutdown complete.")
