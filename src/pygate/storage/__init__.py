from .storage import Storage, StorageSession
from .sqlite import SQLite, SQLiteSession, StorageError, DuplicateEntry

__all__ = [
    "Storage",
    "StorageSession",
    "SQLite",
    "SQLiteSession",
    "StorageError",
    "DuplicateEntry",
]
