"""
Main application entry point for the FastAPI backend.
"""
import logging
import os
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import settings
from .core.body_limit import BodyLimitMiddleware
from .core.exceptions import register_exception_handlers
from .core.lifespan import lifespan
from .core.request_logging import RequestLogMiddleware

from .api.routers import files
from .api.routers import index

logger = logging.getLogger(__name__)


def create_app(
    database_url: Optional[str] = None,
    max_upload_size: Optional[int] = None,
    assets_dir: Optional[str] = None,
) -> FastAPI:
    """
    Build the application.

    Arguments default to the values from ``config.settings``; tests pass
    their own database and upload limit.
    """
    app = FastAPI(
        title="File Drop",
        description="Self-hosted file drop: upload, list, download and delete files",
        version="1.0.0",
        lifespan=lifespan  # Use the lifespan context manager
    )
    app.state.database_url = database_url or settings.DATABASE_URL
    app.state.db = None

    register_exception_handlers(app)

    if max_upload_size is None:
        max_upload_size = settings.max_upload_size()
    app.add_middleware(BodyLimitMiddleware, max_body_size=max_upload_size)
    # Added last so it wraps everything, including body limit rejections
    app.add_middleware(RequestLogMiddleware)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"ok": True}

    # Include routers
    app.include_router(index.router)
    app.include_router(files.router)
    app.include_router(files.api_router)

    # Anything no route claims is served from the assets directory
    assets_dir = assets_dir or settings.ASSETS_DIR
    if os.path.isdir(assets_dir):
        app.mount("/", StaticFiles(directory=assets_dir), name="assets")
    else:
        logger.warning("Assets directory %s not found, static files disabled", assets_dir)

    return app


app = create_app()


def run() -> None:
    """Serve the application on the loopback interface."""
    logger.info("serving on %s:%d", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
