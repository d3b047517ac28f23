"""
Local JSON file record store.

One file per account holding the full collection, for use without a
database. The whole collection is rewritten on every change and must fit in
the configured quota; when it does not, nothing is written and
QuotaExceededError is raised so the user can free space.
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Sequence

from driverlog.domain.errors import QuotaExceededError, StorageError
from driverlog.domain.models import Account, WorkRecord, canonical_username
from driverlog.i18n import tr
from driverlog.infra.mapping import from_persisted, to_json_row
from driverlog.infra.stores.base import RecordStore

logger = logging.getLogger(__name__)


class JsonRecordStore(RecordStore):
    """
    Stores each account's records in ``<directory>/records_<username>.json``.
    """

    FILE_PREFIX = "records_"
    FILE_EXTENSION = ".json"

    def __init__(self, directory: Path, quota_bytes: int = 5 * 1024 * 1024):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def _path(self, account: Account) -> Path:
        return self.directory / f"{self.FILE_PREFIX}{canonical_username(account.username)}{self.FILE_EXTENSION}"

    def _read_rows(self, account: Account) -> List[Dict[str, Any]]:
        path = self._path(account)
        if not path.exists():
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e
        if not isinstance(rows, list):
            raise StorageError(tr("storage.unavailable", details=f"{path} does not hold a record list"))
        return rows

    def _write_rows(self, account: Account, rows: List[Dict[str, Any]]) -> None:
        payload = json.dumps(rows, indent=2, ensure_ascii=False)
        size = len(payload.encode('utf-8'))
        if size > self.quota_bytes:
            logger.warning(f"Record file for {account.username} would be {size} bytes, quota is {self.quota_bytes}")
            raise QuotaExceededError(tr("storage.quota_exceeded"))

        path = self._path(account)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e

    async def list_records(self, account: Account) -> List[WorkRecord]:
        """All records owned by the account, newest first"""
        try:
            records = [from_persisted(row) for row in self._read_rows(account)]
        except (KeyError, ValueError) as e:
            raise StorageError(tr("storage.unavailable", details=str(e))) from e
        records.sort(key=lambda r: (r.date, r.created_at), reverse=True)
        return records

    async def create(self, account: Account, record: WorkRecord) -> WorkRecord:
        """Append a record; the store assigns its id"""
        stored = record.model_copy(update={"id": str(uuid.uuid4())})
        rows = self._read_rows(account)
        rows.insert(0, to_json_row(stored))
        self._write_rows(account, rows)
        return stored

    async def delete(self, account: Account, record_id: str) -> None:
        """Delete a record by ID"""
        rows = self._read_rows(account)
        remaining = [row for row in rows if row.get("id") != record_id]
        if len(remaining) == len(rows):
            raise StorageError(tr("storage.record_not_found", record_id=record_id))
        self._write_rows(account, remaining)

    async def replace_all(self, account: Account, records: Sequence[WorkRecord]) -> int:
        """Rewrite the account's file with ``records`` in a single write"""
        removed = len(self._read_rows(account))
        rows = [
            to_json_row(record.model_copy(update={"id": str(uuid.uuid4())}))
            for record in sorted(records, key=lambda r: (r.date, r.created_at), reverse=True)
        ]
        self._write_rows(account, rows)
        return removed
