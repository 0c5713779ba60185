from .db_file import File

__all__ = [
    "File",
]
