"""
Tests for the text and Excel report services.
"""

import datetime
import zipfile

from conftest import make_daily, make_standard
from driverlog.i18n import set_language
from driverlog.services.excel_report_service import ExcelReportService
from driverlog.services.report_service import ReportService


def _records():
    return [
        make_daily("2024-02-15", route_ids=("AB1", "CD2"), parcels=200),
        make_standard("2024-02-10", route_id="R1", parcels=100, collections=20),
        make_standard("2024-01-31", route_id="R7", parcels=5),
    ]


class TestReportService:

    def test_monthly_summary(self):
        report = ReportService().generate_report("monthly_summary.txt", _records(), 2024, 2)

        assert "Driver Log - February 2024" in report
        assert "Earnings (Month): £416.00" in report
        assert "Deliveries: 300" in report
        assert "Avg/Day: £208.00" in report
        assert "2 rec. - £416.00" in report
        assert "15/02/2024" in report
        assert "31/01/2024" not in report

    def test_empty_month(self):
        report = ReportService().generate_report("monthly_summary.txt", _records(), 2023, 6)
        assert "No records found for this period." in report
        assert "£0.00" in report

    def test_portuguese_and_currency(self):
        set_language("pt")
        report = ReportService(currency_symbol="R$").generate_report("monthly_summary.txt", _records(), 2024, 2)
        assert "Fevereiro de 2024" in report
        assert "R$416.00" in report

    def test_output_file(self, tmp_path):
        output = tmp_path / "reports" / "feb.txt"
        report = ReportService().generate_report("monthly_summary.txt", _records(), 2024, 2, output_file=output)
        assert output.read_text(encoding="utf-8") == report

    def test_list_templates(self):
        assert "monthly_summary.txt" in ReportService().list_templates()


class TestExcelReportService:

    def test_workbook_written(self, tmp_path):
        output = ExcelReportService().generate_report(
            _records(), tmp_path / "log.xlsx", now=datetime.datetime(2024, 2, 20))

        assert output.exists()
        with zipfile.ZipFile(output) as archive:
            names = archive.namelist()
        assert "xl/worksheets/sheet1.xml" in names
        assert "xl/worksheets/sheet3.xml" in names
        assert any(name.startswith("xl/charts/") for name in names)

    def test_empty_collection_has_no_chart(self, tmp_path):
        output = ExcelReportService().generate_report([], tmp_path / "empty.xlsx")

        with zipfile.ZipFile(output) as archive:
            names = archive.namelist()
        assert "xl/worksheets/sheet2.xml" in names
        assert not any(name.startswith("xl/charts/") for name in names)
