"""
Tests for the export formatter.
"""

import datetime

from conftest import make_daily, make_standard
from driverlog.services.export_service import export_filename, to_delimited_text, write_export

HEADER = "Date,Mode,RouteIds,ParcelCount,CollectionCount,TotalValue"


def test_header_only_for_empty_collection():
    assert to_delimited_text([]) == HEADER


def test_rows_in_input_order():
    records = [
        make_daily("2024-02-15", route_ids=("AB1", "CD2"), parcels=200),
        make_standard("2024-02-10", route_id="R9", parcels=100, collections=20),
    ]
    lines = to_delimited_text(records).split("\n")

    assert lines == [
        HEADER,
        '2024-02-15,DAILY,"AB1 + CD2",200,-,300.00',
        '2024-02-10,NORMAL,"R9",100,20,116.00',
    ]


def test_single_route_daily_row():
    text = to_delimited_text([make_daily("2024-01-02", route_ids=("X1",), parcels=0)])
    assert text.endswith('2024-01-02,DAILY,"X1",0,-,180.00')


def test_no_trailing_newline():
    assert not to_delimited_text([make_standard("2024-01-02")]).endswith("\n")


def test_export_filename():
    assert export_filename(datetime.date(2024, 2, 15)) == "driver_log_2024-02-15.csv"


def test_write_export(tmp_path):
    records = [make_standard("2024-02-10", parcels=1)]
    output = write_export(records, tmp_path / "out", today=datetime.date(2024, 2, 15))

    assert output == tmp_path / "out" / "driver_log_2024-02-15.csv"
    assert output.read_text(encoding="utf-8") == to_delimited_text(records)
