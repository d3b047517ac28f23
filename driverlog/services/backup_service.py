"""
Backup Service - JSON snapshots of an account's records.

Backups are plain JSON in the same flat row layout the stores persist, so a
backup can be read by eye, edited, and restored into either backend.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from driverlog.domain.models import Account, WorkRecord
from driverlog.infra.mapping import from_persisted, to_json_row
from driverlog.infra.stores.base import RecordStore

logger = logging.getLogger(__name__)

# e.g. driverlog_backup_2024-02-15_193000.json
BACKUP_NAME_FORMAT = "driverlog_backup_%Y-%m-%d_%H%M%S.json"
FORMAT_VERSION = "1.0"


def human_size(size_bytes: float) -> str:
    """1536 -> '1.5 KB'"""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size_bytes < 1024 or unit == "TB":
            break
        size_bytes /= 1024
    return f"{size_bytes:.1f} {unit}"


class BackupService:
    """
    Writes, reads, restores and prunes backups in one directory.
    """

    def __init__(self, backup_dir: Path):
        self.backup_dir = Path(backup_dir)

    @staticmethod
    def _backup_date(filename: str) -> Optional[datetime]:
        try:
            return datetime.strptime(filename, BACKUP_NAME_FORMAT)
        except ValueError:
            return None

    def create_backup(self, records: Sequence[WorkRecord]) -> Path:
        """
        Write a full backup of the given records.

        Returns:
            Path to the created backup file
        """
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        now = datetime.now()
        backup_file = self.backup_dir / now.strftime(BACKUP_NAME_FORMAT)

        payload = {
            "version": FORMAT_VERSION,
            "created_at": now.isoformat(),
            "app_name": "DriverLog",
            "data": {"records": [to_json_row(r) for r in records]},
        }
        backup_file.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')

        logger.info(f"Backup created: {backup_file} ({len(records)} records)")
        return backup_file

    def _read_rows(self, backup_file: Path) -> List[Dict[str, Any]]:
        if not backup_file.exists():
            raise FileNotFoundError(f"Backup file not found: {backup_file}")

        payload = json.loads(backup_file.read_text(encoding='utf-8'))
        if not isinstance(payload, dict) or "version" not in payload or "data" not in payload:
            raise ValueError(f"{backup_file.name} is not a Driver Log backup")
        return payload["data"].get("records", [])

    def _parse_rows(self, rows: List[Dict[str, Any]]) -> List[WorkRecord]:
        records = []
        for row in rows:
            try:
                records.append(from_persisted(row))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping record {row.get('id')}: {e}")
        return records

    def load_backup(self, backup_file: Path) -> List[WorkRecord]:
        """
        Read the records held in a backup file.

        Entries that fail validation are skipped and logged; totals and tier
        labels are recomputed rather than trusted.

        Raises:
            FileNotFoundError: the file does not exist
            ValueError: the file is not a Driver Log backup
        """
        return self._parse_rows(self._read_rows(backup_file))

    async def restore_backup(self, backup_file: Path, store: RecordStore, account: Account) -> Dict[str, int]:
        """
        Restore records from a backup file.

        This performs a full replacement: the account's existing records are
        swapped for every valid backup record (each with a new id) in one
        atomic store call, so a failure leaves the current records in place.

        Returns:
            Dictionary with counts of removed, restored and skipped records
        """
        rows = self._read_rows(backup_file)
        records = self._parse_rows(rows)

        removed = await store.replace_all(account, records)

        restored = {
            "removed": removed,
            "records": len(records),
            "skipped": len(rows) - len(records),
        }
        logger.info(f"Backup restored: {restored}")
        return restored

    def list_backups(self) -> List[Dict[str, Any]]:
        """Backups in the directory, newest first"""
        if not self.backup_dir.exists():
            return []

        backups = []
        for file in self.backup_dir.glob("driverlog_backup_*.json"):
            created = self._backup_date(file.name)
            if created is None:
                continue
            size = file.stat().st_size
            backups.append({
                "filename": file.name,
                "path": str(file),
                "date": created,
                "size_bytes": size,
                "size_human": human_size(size),
            })
        return sorted(backups, key=lambda b: b["date"], reverse=True)

    def cleanup_old_backups(self, keep_count: int = 5) -> List[str]:
        """
        Delete all but the ``keep_count`` newest backups.

        Returns:
            Filenames that were removed
        """
        removed = []
        for backup in self.list_backups()[keep_count:]:
            Path(backup["path"]).unlink()
            removed.append(backup["filename"])
            logger.info(f"Removed old backup: {backup['filename']}")
        return removed
