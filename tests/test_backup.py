"""
Tests for JSON backup and restore.
"""

import json
import time

import pytest

from conftest import make_daily, make_standard
from driverlog.domain.errors import QuotaExceededError
from driverlog.domain.models import Account
from driverlog.infra.stores.json_store import JsonRecordStore
from driverlog.services.backup_service import BackupService


@pytest.fixture
def records():
    return [
        make_daily("2024-02-15", route_ids=("AB1", "CD2"), parcels=200, id="d1"),
        make_standard("2024-02-10", parcels=100, collections=20, id="s1"),
    ]


def test_create_and_load(tmp_path, records):
    service = BackupService(tmp_path)
    backup_file = service.create_backup(records)

    assert backup_file.name.startswith("driverlog_backup_")
    data = json.loads(backup_file.read_text(encoding="utf-8"))
    assert data["version"] == "1.0"
    assert len(data["data"]["records"]) == 2

    loaded = service.load_backup(backup_file)
    assert [r.id for r in loaded] == ["d1", "s1"]
    assert loaded[0].tier_label == "Etapa 3 (150-250 pcts)"


def test_invalid_rows_are_skipped(tmp_path, records):
    service = BackupService(tmp_path)
    backup_file = service.create_backup(records)
    data = json.loads(backup_file.read_text(encoding="utf-8"))
    data["data"]["records"].append({"id": "bad", "mode": "WEEKLY", "date": "2024-02-01"})
    backup_file.write_text(json.dumps(data), encoding="utf-8")

    assert len(service.load_backup(backup_file)) == 2


def test_not_a_backup(tmp_path):
    path = tmp_path / "other.json"
    path.write_text('{"hello": "world"}', encoding="utf-8")
    with pytest.raises(ValueError):
        BackupService(tmp_path).load_backup(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BackupService(tmp_path).load_backup(tmp_path / "nope.json")


@pytest.mark.asyncio
async def test_restore_replaces_records(tmp_path, records):
    account = Account(username="driver")
    store = JsonRecordStore(tmp_path / "records")
    await store.create(account, make_standard("2023-01-01"))

    service = BackupService(tmp_path / "backups")
    result = await service.restore_backup(service.create_backup(records), store, account)

    assert result == {"removed": 1, "records": 2, "skipped": 0}
    restored = await store.list_records(account)
    assert [r.date.isoformat() for r in restored] == ["2024-02-15", "2024-02-10"]


@pytest.mark.asyncio
async def test_failed_restore_keeps_current_records(tmp_path, records):
    account = Account(username="driver")
    store = JsonRecordStore(tmp_path / "records")
    current = await store.create(account, make_standard("2023-01-01"))
    store.quota_bytes = (tmp_path / "records" / "records_driver.json").stat().st_size

    service = BackupService(tmp_path / "backups")
    with pytest.raises(QuotaExceededError):
        await service.restore_backup(service.create_backup(records), store, account)

    assert [r.id for r in await store.list_records(account)] == [current.id]


def test_list_and_cleanup(tmp_path, records):
    service = BackupService(tmp_path)
    for _ in range(3):
        service.create_backup(records)
        time.sleep(1.01)

    backups = service.list_backups()
    assert len(backups) == 3
    assert backups[0]["date"] > backups[-1]["date"]

    removed = service.cleanup_old_backups(keep_count=1)
    assert len(removed) == 2
    assert len(service.list_backups()) == 1
