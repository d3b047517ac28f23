"""Record store backends"""

from .base import RecordStore
from .factory import open_record_store

__all__ = ["RecordStore", "open_record_store"]
