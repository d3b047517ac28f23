"""Infrastructure layer - Database, files and persistence"""

from .db import DatabaseEngine, get_engine, init_db
from .photo_store import PhotoStore
from .repository import AccountRepository, SqlRecordStore
from .stores import RecordStore, open_record_store

__all__ = [
    "DatabaseEngine", "get_engine", "init_db",
    "AccountRepository", "SqlRecordStore", "PhotoStore",
    "RecordStore", "open_record_store",
]
