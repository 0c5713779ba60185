"""
Service for file upload, listing, download and deletion.
"""
import logging
from typing import List, Optional

from fastapi import Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.schemas import file as file_schema
from ..core.exceptions import StorageFailure
from ..db.crud import files_crud
from ..db.models.db_file import File
from ..utils.multipart import iter_parts
from .size_formatter import format_size

logger = logging.getLogger(__name__)

UPLOAD_FIELD_NAME = "file"


def _raw(value: str) -> bytes:
    """Bytes of a client supplied value exactly as they were received."""
    return value.encode("utf-8", "surrogateescape")


def _display(value: str) -> str:
    # undecodable bytes are shown as U+FFFD
    return _raw(value).decode("utf-8", "replace")


async def ingest_upload(db: AsyncSession, request: Request) -> int:
    """
    Store every file part of a multipart upload.

    Parts are handled strictly in arrival order. A part is stored only if
    its field name is ``file`` and it carries a filename; anything else is
    skipped. Each stored part is committed on its own, so when a later
    part fails the earlier ones stay stored.

    Returns the number of stored files.
    """
    inserted = 0
    async for part in iter_parts(request):
        if part.name != UPLOAD_FIELD_NAME:
            logger.info("Form field name not equal to '%s', skipping", UPLOAD_FIELD_NAME)
            continue
        if part.filename is None:
            logger.info("Got file name missing, skipping")
            continue

        try:
            file_id = await files_crud.insert_file(
                db=db,
                name=part.filename,
                content_type=part.content_type,
                data=part.data
            )
        except SQLAlchemyError as e:
            await db.rollback()
            message = f"Inserting `{_display(part.filename)}` to db failed"
            logger.error("%s -- %s", message, e)
            raise StorageFailure(message, e) from e

        inserted += 1
        logger.info("Stored `%s` as file %d (%d bytes)", _display(part.filename), file_id, len(part.data))
    return inserted


def _to_summary(row) -> file_schema.FileSummary:
    return file_schema.FileSummary(
        id=row.id,
        name=_display(row.name),
        size=format_size(row.data_len),
        modified=row.modified or "",
    )


async def list_files(db: AsyncSession) -> List[file_schema.FileSummary]:
    """
    Summaries of all stored files, metadata only.

    Sizes and timestamps are computed from the current rows on every
    call. The order is whatever the database returns.
    """
    try:
        rows = await files_crud.list_file_infos(db)
    except SQLAlchemyError as e:
        logger.error("Cant read files from db: %s", e)
        raise StorageFailure("Reading files from db failed", e) from e
    return [_to_summary(row) for row in rows]


async def get_file(db: AsyncSession, file_id: int) -> Optional[File]:
    """Fetch a file including its data. A missing id gives None."""
    try:
        return await files_crud.get_file_by_id(db, file_id)
    except SQLAlchemyError as e:
        message = f"Querying for `{file_id}` from db failed"
        logger.error("%s -- %s", message, e)
        raise StorageFailure(message, e) from e


def build_download(file: File) -> Response:
    """
    Response carrying the stored bytes as an attachment.

    The filename is written into Content-Disposition exactly as uploaded,
    without quoting or escaping. Content-Type is only sent when the
    upload had one.
    """
    response = Response(content=file.data)
    if file.content_type is not None:
        response.raw_headers.append((b"content-type", _raw(file.content_type)))
    response.raw_headers.append(
        (b"content-disposition", b"attachment; filename=" + _raw(file.name))
    )
    return response


async def delete_file(db: AsyncSession, file_id: int) -> None:
    """Delete a file. Unknown ids are accepted silently."""
    try:
        await files_crud.delete_file(db, file_id)
    except SQLAlchemyError as e:
        await db.rollback()
        message = f"Deleting `{file_id}` from db failed"
        logger.error("%s -- %s", message, e)
        raise StorageFailure(message, e) from e
    logger.info("Deleted file %d", file_id)
