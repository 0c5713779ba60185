"""
Listing page router.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import StorageFailure
from ...db.database import get_db
from ...services import file_service


templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)

router = APIRouter(tags=["index"])


@router.get("/", response_class=HTMLResponse, summary="File listing page")
async def index(request: Request, db: AsyncSession = Depends(get_db)):
    """Render the upload form and the list of stored files."""
    try:
        files = await file_service.list_files(db)
    except StorageFailure:
        # Already logged, the page is still usable for uploads
        files = []
    return templates.TemplateResponse(request, "index.html", {"files": files})
