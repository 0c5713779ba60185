"""
CRUD operations for database models.
"""
from . import files_crud

__all__ = [
    "files_crud",
]
