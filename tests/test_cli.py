"""
Tests for the command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from driverlog.cli import main
from driverlog.infra import config


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Point settings at a temporary data and config directory"""
    monkeypatch.setenv("DRIVERLOG_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("DRIVERLOG_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("DRIVERLOG_STORAGE_BACKEND", "json")
    monkeypatch.setenv("DRIVERLOG_PREFERENCES", '{"language": "en"}')
    monkeypatch.setenv("DRIVERLOG_LOG_LEVEL", "WARNING")
    monkeypatch.setattr(config, "_settings", None)
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    # Settings are re-read for every invocation, like separate processes
    config.reload_settings()
    return runner.invoke(main, list(args), catch_exceptions=False)


def test_quote(runner, env):
    result = invoke(runner, "quote", "--mode", "DAILY", "--ids", "2", "--parcels", "150")
    assert result.exit_code == 0
    assert "Estimated total: £300.00" in result.output
    assert "Etapa 3 (150-250 pcts)" in result.output


def test_add_and_history(runner, env):
    result = invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "r1",
                    "--parcels", "100", "--collections", "20")
    assert result.exit_code == 0, result.output
    assert "£116.00" in result.output

    result = invoke(runner, "add-daily", "--date", "2024-02-15", "--ids", "2",
                    "--route", "ab1", "--route2", "cd2", "--parcels", "200")
    assert result.exit_code == 0, result.output

    result = invoke(runner, "history", "--json")
    groups = json.loads(result.output)
    assert [g["month"] for g in groups] == ["2024-02"]
    assert groups[0]["count"] == 2
    assert groups[0]["subtotal"] == "416.00"
    assert groups[0]["records"][0]["route_ids"] == ["AB1", "CD2"]

    result = invoke(runner, "months")
    assert "2024-02  February 2024" in result.output


def test_validation_error_exits_non_zero(runner, env):
    result = invoke(runner, "add-daily", "--ids", "2", "--route", "A", "--parcels", "10")
    assert result.exit_code == 1
    assert "Enter ID 2." in result.output
    assert json.loads(invoke(runner, "history", "--json").output) == []


def test_users_have_separate_records(runner, env):
    invoke(runner, "--user", "alice", "add-normal", "--route", "R1", "--parcels", "1")
    result = invoke(runner, "--user", "bob", "history")
    assert "No records found for this period." in result.output


def test_delete(runner, env):
    invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "R1", "--parcels", "5")
    record_id = json.loads(invoke(runner, "history", "--json").output)[0]["records"][0]["id"]

    result = invoke(runner, "delete", record_id)
    assert result.exit_code == 0
    assert json.loads(invoke(runner, "history", "--json").output) == []

    result = invoke(runner, "delete", record_id)
    assert result.exit_code == 1
    assert "was not found" in result.output


def test_photo_attached_to_record(runner, env):
    photo = env / "receipt.jpg"
    photo.write_bytes(b"jpeg")
    invoke(runner, "add-normal", "--route", "R1", "--photo", str(photo))

    record = json.loads(invoke(runner, "history", "--json").output)[0]["records"][0]
    assert len(record["photo_references"]) == 1

    result = invoke(runner, "show", record["id"])
    assert "photo: " in result.output


def test_export_csv(runner, env):
    invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "R1", "--parcels", "100", "--collections", "20")
    result = invoke(runner, "export", "--output", str(env / "exports"))

    assert result.exit_code == 0
    files = list((env / "exports").glob("driver_log_*.csv"))
    assert len(files) == 1
    assert files[0].read_text(encoding="utf-8").splitlines()[1] == '2024-02-10,NORMAL,"R1",100,20,116.00'


def test_export_xlsx(runner, env):
    invoke(runner, "add-normal", "--route", "R1", "--parcels", "1")
    result = invoke(runner, "export", "--format", "xlsx", "--output", str(env / "exports"))
    assert result.exit_code == 0
    assert len(list((env / "exports").glob("driver_log_*.xlsx"))) == 1


def test_report(runner, env):
    invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "R1", "--parcels", "100", "--collections", "20")
    result = invoke(runner, "report", "--month", "2024-02")
    assert "Earnings (Month): £116.00" in result.output


def test_dashboard_json(runner, env):
    invoke(runner, "add-normal", "--route", "R1", "--parcels", "10")
    stats = json.loads(invoke(runner, "dashboard", "--json").output)
    assert stats["record_count"] == 1
    assert len(stats["recent"]) == 1


def test_backup_and_restore(runner, env):
    invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "R1", "--parcels", "5")
    backup_file = invoke(runner, "backup").output.strip()
    invoke(runner, "add-normal", "--date", "2024-02-11", "--route", "R2", "--parcels", "5")

    result = invoke(runner, "restore", "--yes", backup_file)
    assert json.loads(result.output) == {"removed": 2, "records": 1, "skipped": 0}

    assert "driverlog_backup_" in invoke(runner, "backups").output


def test_prefs_saved(runner, env):
    result = invoke(runner, "prefs", "--currency", "€")
    assert json.loads(result.output)["currency_symbol"] == "€"
    assert (env / "config" / "settings.yaml").exists()


def test_sqlite_backend(runner, env, monkeypatch):
    monkeypatch.setenv("DRIVERLOG_STORAGE_BACKEND", "sqlite")
    result = invoke(runner, "add-normal", "--date", "2024-02-10", "--route", "R1", "--parcels", "3")
    assert result.exit_code == 0, result.output

    groups = json.loads(invoke(runner, "history", "--json").output)
    assert groups[0]["subtotal"] == "3.00"
    assert (env / "data" / "driverlog.db").exists()


def test_language_preference(runner, env):
    invoke(runner, "prefs", "--language", "pt")
    result = invoke(runner, "quote", "--parcels", "10")
    assert "Total estimado: £10.00" in result.output


def test_partial_photo_upload_leaves_no_files(runner, env, monkeypatch):
    monkeypatch.setenv("DRIVERLOG_PHOTO_QUOTA_BYTES", "10")
    first = env / "a.jpg"
    second = env / "b.jpg"
    first.write_bytes(b"123456")
    second.write_bytes(b"123456")

    result = invoke(runner, "add-normal", "--route", "R1", "--photo", str(first), "--photo", str(second))

    assert result.exit_code == 1
    assert "Storage full" in result.output
    photo_dir = env / "data" / "photos"
    assert not photo_dir.exists() or list(photo_dir.iterdir()) == []
    assert json.loads(invoke(runner, "history", "--json").output) == []


def test_show_flags_missing_photo(runner, env):
    photo = env / "receipt.jpg"
    photo.write_bytes(b"jpeg")
    invoke(runner, "add-normal", "--route", "R1", "--photo", str(photo), "--photo", str(photo))
    record = json.loads(invoke(runner, "history", "--json").output)[0]["records"][0]
    missing, present = record["photo_references"]
    (env / "data" / "photos" / missing).unlink()

    result = invoke(runner, "show", record["id"])

    assert result.exit_code == 0
    assert f'"id": "{record["id"]}"' in result.output
    assert "photo missing:" in result.output and missing in result.output
    assert f"photo: {env / 'data' / 'photos' / present}" in result.output
