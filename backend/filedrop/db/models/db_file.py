"""
Database model for file storage.
Files are stored as BLOBs in the database.
"""
from sqlalchemy import Column, Integer, LargeBinary, Text, text
from sqlalchemy.types import TypeDecorator

from ..database import Base


class ClientText(TypeDecorator):
    """
    TEXT column for client supplied header values.

    Values that are not valid UTF-8 arrive as strings with surrogate
    escapes; those are stored as the original bytes (SQLite keeps a BLOB
    value in a TEXT column) and read back into the same string.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return value.encode("utf-8", "surrogateescape")
        return value

    def process_result_value(self, value, dialect):
        if isinstance(value, bytes):
            return value.decode("utf-8", "surrogateescape")
        return value


class File(Base):
    """An uploaded file: client supplied name and content type plus the raw bytes."""

    __tablename__ = "file"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(ClientText, nullable=False)
    content_type = Column(ClientText, nullable=True)  # None when the client sent no Content-Type
    data = Column(LargeBinary, nullable=False)
    # Epoch seconds, set by the database on insert
    modified = Column(Integer, nullable=False, server_default=text("(CAST(strftime('%s', 'now') AS INTEGER))"))

    def __repr__(self) -> str:
        return f"<File id={self.id} name={self.name!r}>"
