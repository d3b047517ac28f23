"""Driver Log CLI - earnings tracking for delivery drivers."""

import asyncio
import datetime
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import click

from driverlog import __version__
from driverlog.domain.errors import DriverLogError, StorageError, ValidationError
from driverlog.domain.models import MAX_PHOTOS, RecordDraft, WorkMode, WorkRecord
from driverlog.domain.pricing import RouteCount
from driverlog.domain.validation import quote_draft, validate_draft
from driverlog.i18n import get_available_languages, set_language, tr
from driverlog.infra.config import Settings, get_settings
from driverlog.infra.db import DatabaseEngine
from driverlog.infra.mapping import to_json_row
from driverlog.infra.photo_store import PhotoStore
from driverlog.infra.stores import open_record_store
from driverlog.services.aggregation_service import ALL_MONTHS, ModeFilter, dashboard_stats, distinct_months, \
    filter_and_group
from driverlog.services.backup_service import BackupService
from driverlog.services.excel_report_service import ExcelReportService
from driverlog.services.export_service import export_filename, write_export
from driverlog.services.ledger_service import RecordLedger
from driverlog.services.report_service import ReportService
from driverlog.utils import format_currency, format_date, format_month_year, mode_label, record_summary

T = TypeVar("T")

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


@dataclass
class CliContext:
    settings: Settings
    username: str

    def money(self, value) -> str:
        return format_currency(value, self.settings.preferences.currency_symbol)


def _with_ledger(obj: CliContext, action: Callable[[RecordLedger], Awaitable[T]]) -> T:
    """Open the configured store for the current user, run an action, report errors"""

    async def runner():
        try:
            store, account = await open_record_store(obj.settings, obj.username)
            photo_store = PhotoStore(obj.settings.photo_dir, quota_bytes=obj.settings.photo_quota_bytes)
            ledger = RecordLedger(store, account, photo_store)
            await ledger.refresh()
            return await action(ledger)
        finally:
            await DatabaseEngine.reset_instance()

    try:
        return asyncio.run(runner())
    except DriverLogError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)


def _save_draft(obj: CliContext, draft: RecordDraft, photos: List[Path]) -> None:
    """Validate first, then upload photos and persist the record"""
    if len(photos) > MAX_PHOTOS:
        click.echo(f"Error: {tr('validation.too_many_photos', max=MAX_PHOTOS)}", err=True)
        sys.exit(1)
    try:
        validate_draft(draft)
    except ValidationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    async def action(ledger: RecordLedger) -> WorkRecord:
        references = []
        try:
            for photo in photos:
                references.append(ledger.attach_photo(photo.read_bytes(), photo.suffix or ".jpg"))
            return await ledger.add_draft(draft.model_copy(update={"photo_references": references}))
        except DriverLogError:
            for reference in references:
                ledger.photo_store.remove(reference)
            raise

    record = _with_ledger(obj, action)
    click.echo(tr("entry.saved", mode=mode_label(record.mode), date=format_date(record.date),
                  total=obj.money(record.total_value)))
    if record.mode == WorkMode.DAILY:
        click.echo(tr("entry.tier", tier=record.tier_label))
    click.echo(f"id: {record.id}")


@click.group()
@click.version_option(version=__version__)
@click.option("--user", "username", default=None, help="Account to use (defaults to DRIVERLOG_DEFAULT_USER)")
@click.pass_context
def main(ctx, username: Optional[str]):
    """Driver Log - earnings tracking for delivery drivers."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_language(settings.preferences.language)
    ctx.obj = CliContext(settings=settings, username=username or settings.default_user)


@main.command("add-normal")
@click.option("--date", "day", type=DATE_TYPE, default=None, help="Work date (YYYY-MM-DD), default today")
@click.option("--route", "route_id", default="", help="Route ID")
@click.option("--parcels", default="", help="Parcels delivered")
@click.option("--collections", default="", help="Collections made")
@click.option("--photo", "photos", multiple=True, type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help=f"Photo receipt (up to {MAX_PHOTOS})")
@click.pass_obj
def add_normal(obj: CliContext, day, route_id: str, parcels: str, collections: str, photos):
    """Log a pay-per-item day."""
    draft = RecordDraft(
        mode=WorkMode.NORMAL,
        date=day.date() if day else datetime.date.today(),
        route_id=route_id,
        parcel_count=parcels,
        collection_count=collections,
    )
    _save_draft(obj, draft, list(photos))


@main.command("add-daily")
@click.option("--date", "day", type=DATE_TYPE, default=None, help="Work date (YYYY-MM-DD), default today")
@click.option("--ids", "id_count", type=click.Choice(["1", "2"]), default="1", help="Number of route IDs worked")
@click.option("--route", "route_id", default="", help="Route ID 1")
@click.option("--route2", "second_route_id", default="", help="Route ID 2 (with --ids 2)")
@click.option("--parcels", default="", help="Parcels delivered (sum of both routes)")
@click.option("--photo", "photos", multiple=True, type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help=f"Photo receipt (up to {MAX_PHOTOS})")
@click.pass_obj
def add_daily(obj: CliContext, day, id_count: str, route_id: str, second_route_id: str, parcels: str, photos):
    """Log a daily-rate day."""
    draft = RecordDraft(
        mode=WorkMode.DAILY,
        date=day.date() if day else datetime.date.today(),
        id_count=RouteCount(int(id_count)),
        route_id=route_id,
        second_route_id=second_route_id,
        parcel_count=parcels,
    )
    _save_draft(obj, draft, list(photos))


@main.command()
@click.option("--mode", type=click.Choice([m.value for m in WorkMode]), default=WorkMode.NORMAL.value)
@click.option("--ids", "id_count", type=click.Choice(["1", "2"]), default="1")
@click.option("--parcels", default="")
@click.option("--collections", default="")
@click.pass_obj
def quote(obj: CliContext, mode: str, id_count: str, parcels: str, collections: str):
    """Show the total an entry would earn, without saving it."""
    draft = RecordDraft(
        mode=WorkMode(mode),
        id_count=RouteCount(int(id_count)),
        parcel_count=parcels,
        collection_count=collections,
    )
    amount, tier = quote_draft(draft)
    click.echo(tr("entry.quote", total=obj.money(amount)))
    if tier:
        click.echo(tr("entry.tier", tier=tier))


@main.command()
@click.argument("record_id")
@click.pass_obj
def delete(obj: CliContext, record_id: str):
    """Delete a record."""

    async def action(ledger: RecordLedger):
        await ledger.delete(record_id)

    _with_ledger(obj, action)
    click.echo(tr("entry.deleted", record_id=record_id))


@main.command()
@click.argument("record_id")
@click.pass_obj
def show(obj: CliContext, record_id: str):
    """Show one record and where its photos are stored."""

    async def action(ledger: RecordLedger):
        record = ledger.find(record_id)
        if record is None:
            raise DriverLogError(tr("storage.record_not_found", record_id=record_id))
        photos = []
        for reference in record.photo_references:
            try:
                photos.append(f"photo: {ledger.photo_store.path_for(reference)}")
            except StorageError as e:
                photos.append(f"photo missing: {e.message}")
        return record, photos

    record, photo_lines = _with_ledger(obj, action)
    click.echo(json.dumps(to_json_row(record), indent=2, ensure_ascii=False))
    for line in photo_lines:
        click.echo(line)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def dashboard(obj: CliContext, as_json: bool):
    """Current month earnings, deliveries and recent entries."""

    async def action(ledger: RecordLedger):
        return dashboard_stats(ledger.records, series_length=obj.settings.preferences.recent_series_length)

    stats = _with_ledger(obj, action)
    if as_json:
        click.echo(stats.model_dump_json(indent=2))
        return

    click.echo(f"{tr('dashboard.title')} - {format_month_year(f'{stats.year:04d}-{stats.month:02d}')}")
    click.echo(f"{tr('dashboard.month_earnings')}: {obj.money(stats.total_value)}")
    click.echo(f"{tr('dashboard.deliveries')}: {stats.parcel_count}")
    click.echo(f"{tr('dashboard.average_per_day')}: {obj.money(stats.average_per_day)}")
    click.echo(f"{tr('dashboard.recent')}:")
    if not stats.recent:
        click.echo(f"  {tr('dashboard.no_data')}")
    for point in stats.recent:
        click.echo(f"  {point.label}  {obj.money(point.value)}")


@main.command()
@click.option("--mode", "mode_filter", type=click.Choice([m.value for m in ModeFilter]), default=ModeFilter.ALL.value)
@click.option("--month", "month_filter", default=ALL_MONTHS, help="YYYY-MM or ALL")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def history(obj: CliContext, mode_filter: str, month_filter: str, as_json: bool):
    """Records grouped by month, newest first."""

    async def action(ledger: RecordLedger):
        return filter_and_group(ledger.records, ModeFilter(mode_filter), month_filter)

    groups = _with_ledger(obj, action)
    if as_json:
        click.echo(json.dumps(
            [
                {
                    "month": key,
                    "count": group.count,
                    "subtotal": f"{group.subtotal:.2f}",
                    "records": [to_json_row(r) for r in group.records],
                }
                for key, group in groups.items()
            ],
            indent=2,
            ensure_ascii=False,
        ))
        return

    if not groups:
        click.echo(tr("history.empty"))
        return

    for key, group in groups.items():
        click.echo(f"{format_month_year(key)} - {tr('history.group_count', count=group.count)} - "
                   f"{obj.money(group.subtotal)}")
        for record in group.records:
            click.echo(f"  {format_date(record.date)}  {mode_label(record.mode):<7} "
                       f"{', '.join(record.route_ids):<15} {obj.money(record.total_value):>10}  "
                       f"{record_summary(record)}  [{record.id}]")


@main.command()
@click.pass_obj
def months(obj: CliContext):
    """Months that have records, newest first."""

    async def action(ledger: RecordLedger):
        return distinct_months(ledger.records)

    for key in _with_ledger(obj, action):
        click.echo(f"{key}  {format_month_year(key)}")


@main.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "xlsx"]), default="csv")
@click.option("--output", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory to write to (defaults to the configured export directory)")
@click.pass_obj
def export(obj: CliContext, fmt: str, output_dir: Optional[Path]):
    """Export all records."""
    prefs = obj.settings.preferences
    if output_dir is None:
        output_dir = Path(prefs.export_directory) if prefs.export_directory else Path.cwd()

    async def action(ledger: RecordLedger):
        return ledger.records

    records = _with_ledger(obj, action)
    if fmt == "csv":
        output_file = write_export(records, output_dir)
    else:
        service = ExcelReportService(prefs.currency_symbol, prefs.recent_series_length)
        output_file = service.generate_report(records, output_dir / export_filename().replace(".csv", ".xlsx"))
    click.echo(f"{output_file}")


@main.command()
@click.option("--month", "period", default=None, help="YYYY-MM, default current month")
@click.option("--template", "template_name", default="monthly_summary.txt")
@click.option("--output", "output_file", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def report(obj: CliContext, period: Optional[str], template_name: str, output_file: Optional[Path]):
    """Render a monthly summary report."""
    try:
        month_start = datetime.datetime.strptime(period, "%Y-%m") if period else datetime.datetime.now()
    except ValueError:
        raise click.BadParameter("expected YYYY-MM", param_hint="--month")

    async def action(ledger: RecordLedger):
        return ledger.records

    records = _with_ledger(obj, action)
    prefs = obj.settings.preferences
    service = ReportService(currency_symbol=prefs.currency_symbol)
    click.echo(service.generate_report(template_name, records, month_start.year, month_start.month,
                                       output_file=output_file, series_length=prefs.recent_series_length))


@main.command()
@click.pass_obj
def backup(obj: CliContext):
    """Write a JSON backup of all records."""
    service = BackupService(obj.settings.backup_dir)

    async def action(ledger: RecordLedger):
        return service.create_backup(ledger.records)

    backup_file = _with_ledger(obj, action)
    service.cleanup_old_backups(obj.settings.preferences.backup_retention_count)
    click.echo(f"{backup_file}")


@main.command()
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt="This replaces all current records. Continue?")
@click.pass_obj
def restore(obj: CliContext, backup_file: Path):
    """Replace all records with the contents of a backup."""
    service = BackupService(obj.settings.backup_dir)

    async def action(ledger: RecordLedger):
        return await service.restore_backup(backup_file, ledger.store, ledger.account)

    try:
        restored = _with_ledger(obj, action)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(json.dumps(restored))


@main.command()
@click.pass_obj
def backups(obj: CliContext):
    """List available backups."""
    for info in BackupService(obj.settings.backup_dir).list_backups():
        click.echo(f"{info['date']:%Y-%m-%d %H:%M:%S}  {info['size_human']:>9}  {info['path']}")


@main.command()
@click.option("--language", default=None,
              type=click.Choice(["auto"] + [code for code, _ in get_available_languages()]))
@click.option("--currency", "currency_symbol", default=None)
@click.pass_obj
def prefs(obj: CliContext, language: Optional[str], currency_symbol: Optional[str]):
    """Show or change preferences."""
    preferences = obj.settings.preferences
    update = {}
    if language:
        update["language"] = language
    if currency_symbol:
        update["currency_symbol"] = currency_symbol
    if update:
        obj.settings.preferences = preferences.model_copy(update=update)
        obj.settings.save_preferences()
    click.echo(obj.settings.preferences.model_dump_json(indent=2))
