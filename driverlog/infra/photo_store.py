"""
Photo receipt storage.

Binary objects are written to a directory and addressed by an opaque
reference (the file name). Compression is the uploader's job; this store only
enforces a total size quota.
"""

import logging
import re
import uuid
from pathlib import Path

from driverlog.domain.errors import QuotaExceededError, StorageError
from driverlog.i18n import tr

logger = logging.getLogger(__name__)

_REFERENCE = re.compile(r"^[0-9a-f]{32}\.[a-z0-9]{1,5}$")


class PhotoStore:
    """
    Stores photo receipts as files named ``<uuid>.<ext>``.
    """

    def __init__(self, directory: Path, quota_bytes: int = 50 * 1024 * 1024):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def used_bytes(self) -> int:
        """Total size of all stored photos"""
        if not self.directory.exists():
            return 0
        return sum(f.stat().st_size for f in self.directory.iterdir() if f.is_file())

    def upload(self, data: bytes, suffix: str = ".jpg") -> str:
        """
        Store a photo and return its reference.

        Raises:
            QuotaExceededError: the photo does not fit in the remaining quota
            StorageError: the file could not be written
        """
        suffix = suffix.lower() if suffix.startswith(".") else f".{suffix.lower()}"
        reference = f"{uuid.uuid4().hex}{suffix}"
        if not _REFERENCE.match(reference):
            raise StorageError(tr("storage.unavailable", details=f"unsupported file type {suffix}"))

        if self.used_bytes() + len(data) > self.quota_bytes:
            raise QuotaExceededError(tr("storage.quota_exceeded"))

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / reference).write_bytes(data)
        except OSError as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e

        logger.info(f"Stored photo {reference} ({len(data)} bytes)")
        return reference

    def path_for(self, reference: str) -> Path:
        """Resolve a reference to the file holding the photo"""
        path = self.directory / reference
        if not _REFERENCE.match(reference) or not path.is_file():
            raise StorageError(tr("storage.photo_not_found", reference=reference))
        return path

    def read(self, reference: str) -> bytes:
        try:
            return self.path_for(reference).read_bytes()
        except OSError as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e

    def remove(self, reference: str) -> None:
        """Delete a stored photo; unknown references are ignored"""
        if not _REFERENCE.match(reference):
            return
        try:
            (self.directory / reference).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e
