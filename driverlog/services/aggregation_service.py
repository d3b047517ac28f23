"""
Aggregation Engine.

Pure functions over a record collection passed in by value: monthly totals,
the recent-earnings series, the filtered and month-grouped history, and the
month selector. Nothing here mutates its input or raises on well-formed
records.

Ordering rules:
- Month membership is calendar based (year and month of ``date``).
- Equal dates keep a stable order: the recent series falls back to
  ``created_at``; the history keeps input order.
"""

import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, computed_field

from driverlog.domain.models import DailyRecord, StandardRecord, WorkRecord
from driverlog.domain.pricing import CENTS

ALL_MONTHS = "ALL"
ZERO = Decimal("0.00")


class ModeFilter(str, Enum):
    """History filter on pay mode"""
    ALL = "ALL"
    NORMAL = "NORMAL"
    DAILY = "DAILY"


class SeriesPoint(BaseModel):
    """One bar of the recent-earnings chart"""
    date: datetime.date
    label: str
    value: Decimal


class MonthGroup(BaseModel):
    """History records of one 'YYYY-MM' month, newest first"""
    key: str
    records: List[WorkRecord]

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return sum_total(self.records)

    @computed_field
    @property
    def count(self) -> int:
        return len(self.records)


class DashboardStats(BaseModel):
    """Figures shown on the dashboard for one calendar month"""
    year: int
    month: int
    total_value: Decimal
    parcel_count: int
    record_count: int
    average_per_day: Decimal
    recent: List[SeriesPoint]


def sum_total(records: Iterable[WorkRecord]) -> Decimal:
    return sum((r.total_value for r in records), ZERO).quantize(CENTS)


def parcel_count_of(record: WorkRecord) -> int:
    if isinstance(record, StandardRecord):
        return record.parcel_count
    if isinstance(record, DailyRecord):
        return record.parcel_count
    raise TypeError(f"Unknown record type: {type(record).__name__}")


def records_in_month(records: Iterable[WorkRecord], year: int, month: int) -> List[WorkRecord]:
    """Records whose date falls in the given calendar month, input order kept"""
    return [r for r in records if r.date.year == year and r.date.month == month]


def monthly_total(records: Iterable[WorkRecord], year: int, month: int) -> Decimal:
    """Sum of totals for one calendar month"""
    return sum_total(records_in_month(records, year, month))


def monthly_parcel_count(records: Iterable[WorkRecord], year: int, month: int) -> int:
    """Sum of parcel counts for one calendar month"""
    return sum(parcel_count_of(r) for r in records_in_month(records, year, month))


def recent_series(records: Iterable[WorkRecord], n: int = 7) -> List[SeriesPoint]:
    """
    The last ``n`` records in chronological order, as (DD/MM, total) points.

    This is a chronological tail, not a top-N by value. Records on the same
    date are ordered by creation instant.
    """
    if n <= 0:
        return []
    ordered = sorted(records, key=lambda r: (r.date, r.created_at))
    return [
        SeriesPoint(date=r.date, label=r.date.strftime("%d/%m"), value=r.total_value)
        for r in ordered[-n:]
    ]


def average_per_day(total_value: Decimal, active_day_count: int) -> Decimal:
    """
    Total divided by the number of records in the month.

    The denominator counts records, not distinct days: two entries on the
    same day count twice. Zero records gives zero.
    """
    if active_day_count <= 0:
        return ZERO
    return (Decimal(total_value) / active_day_count).quantize(CENTS, rounding=ROUND_HALF_UP)


def filter_and_group(records: Sequence[WorkRecord],
                     mode_filter: ModeFilter = ModeFilter.ALL,
                     month_filter: str = ALL_MONTHS) -> Dict[str, MonthGroup]:
    """
    Filter the history and group it by month.

    Records are filtered by mode and 'YYYY-MM' month (or ALL), sorted by date
    descending with ties in input order, then grouped. Groups are returned in
    descending month order.
    """
    mode_filter = ModeFilter(mode_filter)
    selected = [
        r for r in records
        if (mode_filter is ModeFilter.ALL or r.mode == mode_filter.value)
        and (month_filter == ALL_MONTHS or r.year_month_key == month_filter)
    ]
    # sorted() is stable, also with reverse=True
    selected = sorted(selected, key=lambda r: r.date, reverse=True)

    buckets: Dict[str, List[WorkRecord]] = {}
    for record in selected:
        buckets.setdefault(record.year_month_key, []).append(record)

    return {
        key: MonthGroup(key=key, records=buckets[key])
        for key in sorted(buckets, reverse=True)
    }


def distinct_months(records: Iterable[WorkRecord]) -> List[str]:
    """Every 'YYYY-MM' present, once each, newest first"""
    return sorted({r.year_month_key for r in records}, reverse=True)


def dashboard_stats(records: Sequence[WorkRecord],
                    now: Optional[datetime.datetime] = None,
                    series_length: int = 7) -> DashboardStats:
    """
    Current-month figures plus the recent series.

    The recent series is taken over all records, not only the current month.
    """
    now = now or datetime.datetime.now()
    month_records = records_in_month(records, now.year, now.month)
    total = sum_total(month_records)
    return DashboardStats(
        year=now.year,
        month=now.month,
        total_value=total,
        parcel_count=sum(parcel_count_of(r) for r in month_records),
        record_count=len(month_records),
        average_per_day=average_per_day(total, len(month_records)),
        recent=recent_series(records, series_length),
    )
