import datetime
from decimal import Decimal
from pathlib import Path

from driverlog.domain.models import DailyRecord, StandardRecord, WorkMode
from driverlog.domain.pricing import RouteCount
from driverlog.i18n import get_language, month_name, tr


def get_resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource shipped inside the package.

    Args:
        relative_path: Relative path from the package root (e.g., "resources/templates")

    Returns:
        Absolute Path object
    """
    return Path(__file__).parent.absolute() / relative_path


def format_currency(value: Decimal, symbol: str = "£") -> str:
    """Format money for display, e.g. £1,234.50"""
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date(day: datetime.date) -> str:
    """DD/MM/YYYY"""
    return day.strftime("%d/%m/%Y")


def format_month_year(key: str) -> str:
    """
    Human label for a 'YYYY-MM' key.

    'October 2023' in English, 'Outubro de 2023' in Portuguese.
    """
    year, month = key.split("-")
    name = month_name(int(month))
    label = f"{name} de {year}" if get_language() == "pt" else f"{name} {year}"
    return label[0].upper() + label[1:]


def mode_label(mode: WorkMode) -> str:
    return tr("mode.normal") if WorkMode(mode) is WorkMode.NORMAL else tr("mode.daily")


def record_summary(record) -> str:
    """One-line description of what was worked, as shown in the history list"""
    if isinstance(record, StandardRecord):
        return tr("summary.normal", parcels=record.parcel_count, collections=record.collection_count)
    if isinstance(record, DailyRecord):
        if record.id_count is RouteCount.SINGLE:
            return tr("summary.daily_single", parcels=record.parcel_count)
        return tr("summary.daily_double", parcels=record.parcel_count, tier=record.tier_label)
    raise TypeError(f"Unknown record type: {type(record).__name__}")
