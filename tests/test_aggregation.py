"""
Tests for the aggregation engine.
"""

import datetime
from decimal import Decimal

import pytest

from conftest import make_daily, make_standard
from driverlog.domain.pricing import MAX_COUNT
from driverlog.services.aggregation_service import (
    ALL_MONTHS, ModeFilter, average_per_day, dashboard_stats, distinct_months, filter_and_group,
    monthly_parcel_count, monthly_total, recent_series,
)


@pytest.fixture
def february():
    return [
        make_standard("2024-02-10", route_id="R1", parcels=100, collections=20),
        make_daily("2024-02-15", route_ids=("AB1", "CD2"), parcels=200),
    ]


@pytest.fixture
def mixed():
    return [
        make_standard("2024-03-02", parcels=50),
        make_daily("2024-01-05", parcels=10),
        make_standard("2024-01-20", parcels=120, collections=5),
        make_daily("2023-12-31", route_ids=("A", "B"), parcels=300),
        make_standard("2024-03-02", route_id="R2", parcels=10),
    ]


class TestMonthlyFigures:

    def test_february_scenario(self, february):
        assert monthly_total(february, 2024, 2) == Decimal("416.00")
        assert monthly_parcel_count(february, 2024, 2) == 300

        groups = filter_and_group(february, ModeFilter.ALL, ALL_MONTHS)
        assert list(groups) == ["2024-02"]
        assert groups["2024-02"].count == 2
        assert groups["2024-02"].subtotal == Decimal("416.00")

    def test_other_month_is_zero(self, february):
        assert monthly_total(february, 2024, 3) == Decimal("0.00")
        assert monthly_parcel_count(february, 2023, 2) == 0

    def test_month_boundary(self):
        records = [make_standard("2024-01-31", parcels=5), make_standard("2024-02-01", parcels=7)]
        assert monthly_total(records, 2024, 1) == Decimal("5.00")
        assert monthly_total(records, 2024, 2) == Decimal("7.00")

    def test_empty_collection(self):
        assert monthly_total([], 2024, 1) == Decimal("0.00")

    def test_largest_counts_aggregate(self):
        records = [make_standard("2024-02-01", parcels=MAX_COUNT, collections=MAX_COUNT) for _ in range(50)]
        assert monthly_total(records, 2024, 2) == Decimal("9000000.00")
        assert dashboard_stats(records, now=datetime.datetime(2024, 2, 2)).record_count == 50


class TestAveragePerDay:

    def test_zero_records(self):
        assert average_per_day(Decimal("100.00"), 0) == Decimal("0.00")

    def test_rounds_half_up(self):
        assert average_per_day(Decimal("100.00"), 3) == Decimal("33.33")
        assert average_per_day(Decimal("0.05"), 2) == Decimal("0.03")


class TestRecentSeries:

    def test_fewer_records_than_window(self, mixed):
        series = recent_series(mixed, 7)
        assert len(series) == len(mixed)
        dates = [p.date for p in series]
        assert dates == sorted(dates)

    def test_window_is_chronological_tail(self):
        start = datetime.date(2024, 1, 1)
        records = [make_standard(start + datetime.timedelta(days=i), parcels=i) for i in range(10)]
        series = recent_series(list(reversed(records)), 7)

        assert len(series) == 7
        assert series[0].date == datetime.date(2024, 1, 4)
        assert series[-1].label == "10/01"
        assert series[-1].value == Decimal("9.00")

    def test_same_day_ordered_by_creation(self):
        day = datetime.date(2024, 5, 1)
        later = make_standard(day, parcels=2, created_at=datetime.datetime(2024, 5, 1, 20, 0))
        earlier = make_standard(day, parcels=1, created_at=datetime.datetime(2024, 5, 1, 8, 0))
        series = recent_series([later, earlier], 7)
        assert [p.value for p in series] == [Decimal("1.00"), Decimal("2.00")]

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_window(self, mixed, n):
        assert recent_series(mixed, n) == []


class TestFilterAndGroup:

    def test_groups_match_distinct_months(self, mixed):
        groups = filter_and_group(mixed)
        assert list(groups) == ["2024-03", "2024-01", "2023-12"]
        assert sum(g.count for g in groups.values()) == len(mixed)
        for group in groups.values():
            assert group.subtotal == sum((r.total_value for r in group.records), Decimal("0.00"))
            assert all(r.year_month_key == group.key for r in group.records)

    def test_records_newest_first(self, mixed):
        groups = filter_and_group(mixed)
        january = groups["2024-01"].records
        assert [r.date.day for r in january] == [20, 5]

    def test_equal_dates_keep_input_order(self, mixed):
        march = filter_and_group(mixed)["2024-03"].records
        assert [r.route_id for r in march] == ["R1", "R2"]

    def test_mode_filter(self, mixed):
        groups = filter_and_group(mixed, ModeFilter.DAILY)
        assert list(groups) == ["2024-01", "2023-12"]
        assert all(r.mode == "DAILY" for g in groups.values() for r in g.records)

    def test_month_filter(self, mixed):
        groups = filter_and_group(mixed, ModeFilter.NORMAL, "2024-01")
        assert list(groups) == ["2024-01"]
        assert groups["2024-01"].count == 1

    def test_no_matches(self, mixed):
        assert filter_and_group(mixed, ModeFilter.ALL, "1999-01") == {}

    def test_input_not_mutated(self, mixed):
        before = list(mixed)
        filter_and_group(mixed)
        recent_series(mixed)
        assert mixed == before


class TestDistinctMonths:

    def test_unique_descending(self):
        records = [make_standard(d) for d in ("2024-01-05", "2024-03-02", "2024-01-20")]
        assert distinct_months(records) == ["2024-03", "2024-01"]

    def test_empty(self):
        assert distinct_months([]) == []


class TestDashboardStats:

    def test_current_month(self, february):
        stats = dashboard_stats(february, now=datetime.datetime(2024, 2, 20, 12, 0))
        assert stats.total_value == Decimal("416.00")
        assert stats.parcel_count == 300
        assert stats.record_count == 2
        assert stats.average_per_day == Decimal("208.00")
        assert [p.label for p in stats.recent] == ["10/02", "15/02"]

    def test_recent_series_spans_all_months(self, february):
        stats = dashboard_stats(february, now=datetime.datetime(2024, 4, 1))
        assert stats.total_value == Decimal("0.00")
        assert stats.average_per_day == Decimal("0.00")
        assert len(stats.recent) == 2
