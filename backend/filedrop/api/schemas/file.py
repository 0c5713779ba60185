"""Pydantic schemas for file management."""
from pydantic import BaseModel, ConfigDict


class FileSummary(BaseModel):
    """One row of the file listing (metadata only, no data)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    size: str  # human readable, e.g. "5.1 MB"; empty when unknown
    modified: str  # "YYYY-MM-DD HH:MM:SS" (UTC); empty when unknown


class FileListResponse(BaseModel):
    """Schema for listing files."""
    files: list[FileSummary]
    count: int
