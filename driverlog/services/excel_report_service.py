"""
Excel Report Service using XlsxWriter.
Generates an Excel workbook with the record table and a dashboard.
"""

import datetime
from pathlib import Path
from typing import Optional, Sequence

import xlsxwriter

from driverlog.domain.models import DailyRecord, StandardRecord, WorkRecord
from driverlog.i18n import tr
from driverlog.services.aggregation_service import DashboardStats, dashboard_stats
from driverlog.services.export_service import EXPORT_COLUMNS, NO_COLLECTIONS, ROUTE_SEPARATOR
from driverlog.utils import format_month_year


class ExcelReportService:
    """
    Generates .xlsx reports with:
    - Tab 1: Records (same columns as the CSV export, typed cells)
    - Tab 2: Dashboard (KPI cards + recent earnings chart)
    """

    def __init__(self, currency_symbol: str = "£", series_length: int = 7):
        self.currency_symbol = currency_symbol
        self.series_length = series_length

    def generate_report(self, records: Sequence[WorkRecord], output_path: Path,
                        now: Optional[datetime.datetime] = None) -> Path:
        """
        Write the workbook to ``output_path``.

        Records are written in the order given. The dashboard covers the
        calendar month of ``now``.
        """
        stats = dashboard_stats(records, now=now, series_length=self.series_length)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook = xlsxwriter.Workbook(str(output_path))

        money_format = f'"{self.currency_symbol}"#,##0.00'
        fmt_header = workbook.add_format({
            'bold': True, 'bg_color': '#2563EB', 'font_color': 'white', 'border': 1
        })
        fmt_date = workbook.add_format({'num_format': 'dd/mm/yyyy', 'border': 1})
        fmt_money = workbook.add_format({'num_format': money_format, 'border': 1})
        fmt_cell = workbook.add_format({'border': 1})

        ws_records = workbook.add_worksheet(tr("report.sheet.records"))
        self._create_records_sheet(ws_records, records, fmt_header, fmt_date, fmt_money, fmt_cell)

        ws_dash = workbook.add_worksheet(tr("report.sheet.dashboard"))
        self._create_dashboard_sheet(workbook, ws_dash, stats, money_format)

        workbook.close()
        return output_path

    def _create_records_sheet(self, worksheet, records, fmt_header, fmt_date, fmt_money, fmt_cell):
        """One row per record, matching the CSV column order"""
        for col, header in enumerate(EXPORT_COLUMNS):
            worksheet.write(0, col, header, fmt_header)

        for row, record in enumerate(records, start=1):
            if isinstance(record, StandardRecord):
                route_ids = record.route_id
                collections = record.collection_count
            elif isinstance(record, DailyRecord):
                route_ids = ROUTE_SEPARATOR.join(record.route_ids)
                collections = NO_COLLECTIONS
            else:
                raise TypeError(f"Unknown record type: {type(record).__name__}")

            worksheet.write_datetime(row, 0, datetime.datetime.combine(record.date, datetime.time.min), fmt_date)
            worksheet.write_string(row, 1, record.mode, fmt_cell)
            worksheet.write_string(row, 2, route_ids, fmt_cell)
            worksheet.write_number(row, 3, record.parcel_count, fmt_cell)
            worksheet.write(row, 4, collections, fmt_cell)
            worksheet.write_number(row, 5, float(record.total_value), fmt_money)

        worksheet.set_column(0, 0, 12)
        worksheet.set_column(1, 1, 10)
        worksheet.set_column(2, 2, 18)
        worksheet.set_column(3, 5, 16)
        worksheet.freeze_panes(1, 0)

    def _create_dashboard_sheet(self, workbook, worksheet, stats: DashboardStats, money_format: str):
        """Create the Dashboard with KPI cards and the recent earnings chart"""
        worksheet.hide_gridlines(2)

        worksheet.set_column('A:A', 2)
        worksheet.set_column('B:C', 16)
        worksheet.set_column('D:D', 4)
        worksheet.set_column('E:F', 16)
        worksheet.set_column('G:G', 4)
        worksheet.set_column('H:I', 16)
        worksheet.set_row(1, 28)
        worksheet.set_row(3, 22)
        worksheet.set_row(4, 28)

        # --- TITLE ---
        title_fmt = workbook.add_format({
            'bold': True, 'font_size': 20, 'font_color': '#1E3A8A'
        })
        period = format_month_year(f"{stats.year:04d}-{stats.month:02d}")
        worksheet.merge_range('B2:I2', tr("report.dashboard.title", period=period), title_fmt)

        # --- KPI CARDS ---
        card_header_fmt = workbook.add_format({
            'bold': True, 'font_size': 11, 'font_color': '#666666',
            'bg_color': '#F2F2F2', 'align': 'center', 'border': 1
        })
        card_money_fmt = workbook.add_format({
            'bold': True, 'font_size': 18, 'font_color': '#1E3A8A',
            'bg_color': 'white', 'align': 'center', 'border': 1, 'num_format': money_format
        })
        card_count_fmt = workbook.add_format({
            'bold': True, 'font_size': 18, 'font_color': '#1E3A8A',
            'bg_color': 'white', 'align': 'center', 'border': 1, 'num_format': '#,##0'
        })

        worksheet.merge_range('B4:C4', tr("dashboard.month_earnings"), card_header_fmt)
        worksheet.merge_range('B5:C5', float(stats.total_value), card_money_fmt)

        worksheet.merge_range('E4:F4', tr("dashboard.deliveries"), card_header_fmt)
        worksheet.merge_range('E5:F5', stats.parcel_count, card_count_fmt)

        worksheet.merge_range('H4:I4', tr("dashboard.average_per_day"), card_header_fmt)
        worksheet.merge_range('H5:I5', float(stats.average_per_day), card_money_fmt)

        if not stats.recent:
            worksheet.write('B8', tr("dashboard.no_data"))
            return

        # --- CHART ---
        ws_hidden = workbook.add_worksheet("Hidden_Chart_Data")
        ws_hidden.hide()
        ws_hidden.write(0, 0, tr("report.dashboard.day"))
        ws_hidden.write(0, 1, tr("report.dashboard.value"))
        for row, point in enumerate(stats.recent, start=1):
            ws_hidden.write_string(row, 0, point.label)
            ws_hidden.write_number(row, 1, float(point.value))
        last_row = len(stats.recent)

        chart = workbook.add_chart({'type': 'column'})
        chart.add_series({
            'name': tr("report.dashboard.chart"),
            'categories': ['Hidden_Chart_Data', 1, 0, last_row, 0],
            'values': ['Hidden_Chart_Data', 1, 1, last_row, 1],
            'fill': {'color': '#3B82F6'},
            'data_labels': {'value': True, 'num_format': money_format},
        })
        chart.set_title({'name': tr("report.dashboard.chart")})
        chart.set_legend({'none': True})
        chart.set_y_axis({'visible': False, 'major_gridlines': {'visible': False}})
        worksheet.insert_chart('B7', chart, {'x_scale': 1.6, 'y_scale': 1.2})
