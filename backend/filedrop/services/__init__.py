"""
Services module for the file drop backend.
Contains the business logic between the routers and the database.
"""
from .file_service import ingest_upload, list_files, get_file, build_download, delete_file
from .size_formatter import format_size

__all__ = [
    # File service
    "ingest_upload",
    "list_files",
    "get_file",
    "build_download",
    "delete_file",
    # Formatting
    "format_size",
]
