"""
File Management Router
Endpoints for uploading, downloading, and deleting files.
"""
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.database import get_db
from ...services import file_service
from ..schemas import file as file_schema


router = APIRouter(
    prefix="/file",
    tags=["files"],
    responses={404: {"description": "Not found"}},
)

# Post/redirect/get: browsers come back to the listing with a GET
LISTING_URL = "/"


def _redirect_to_listing() -> RedirectResponse:
    return RedirectResponse(LISTING_URL, status_code=status.HTTP_303_SEE_OTHER)


@router.post(
    "",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Upload files"
)
async def upload_file(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Upload one or more files as ``multipart/form-data``.

    Every part named ``file`` that has a filename is stored as its own
    file. Other parts are ignored. Redirects to the listing when done.
    """
    await file_service.ingest_upload(db, request)
    return _redirect_to_listing()


@router.get(
    "/{file_id}",
    summary="Download a file"
)
async def download_file(
    file_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Download a file by ID.

    Returns the raw bytes as an attachment.
    """
    file = await file_service.get_file(db, file_id)
    if file is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return file_service.build_download(file)


@router.post(
    "/{file_id}/delete",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Delete a file"
)
async def delete_file(
    file_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a file by ID, then redirect to the listing whether or not it existed."""
    await file_service.delete_file(db, file_id)
    return _redirect_to_listing()


api_router = APIRouter(
    prefix="/api/files",
    tags=["files"],
)


@api_router.get(
    "",
    response_model=file_schema.FileListResponse,
    summary="List all files"
)
async def list_files(db: AsyncSession = Depends(get_db)):
    """
    List stored files as JSON.

    Returns metadata only (no file data).
    """
    files = await file_service.list_files(db)
    return file_schema.FileListResponse(files=files, count=len(files))
