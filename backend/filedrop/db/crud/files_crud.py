"""CRUD operations for file management in the database."""
from typing import Optional, List, Sequence

from sqlalchemy import delete, func
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..models.db_file import File


async def insert_file(
    db: AsyncSession,
    name: str,
    content_type: Optional[str],
    data: bytes
) -> int:
    """Insert a new file in a single statement and return its id."""
    file = File(
        name=name,
        content_type=content_type,
        data=data
    )
    db.add(file)
    await db.commit()
    return file.id


async def get_file_by_id(
    db: AsyncSession,
    file_id: int
) -> Optional[File]:
    """Retrieve a file (including its data) by its ID."""
    result = await db.execute(
        select(File).filter(File.id == file_id)
    )
    return result.scalar_one_or_none()


async def list_file_infos(db: AsyncSession) -> List[Row]:
    """
    Retrieve file metadata without loading the BLOB data.

    Each row has ``id``, ``name``, ``data_len`` (byte length of the data,
    computed by the database) and ``modified`` (``YYYY-MM-DD HH:MM:SS``
    in UTC). No ordering is applied.
    """
    result = await db.execute(
        select(
            File.id,
            File.name,
            func.length(File.data).label("data_len"),
            func.datetime(File.modified, "unixepoch").label("modified"),
        )
    )
    rows: Sequence[Row] = result.all()
    return list(rows)


async def delete_file(
    db: AsyncSession,
    file_id: int
) -> None:
    """Delete a file by its ID. Deleting an unknown id is not an error."""
    await db.execute(
        delete(File).where(File.id == file_id)
    )
    await db.commit()
