"""
Report Generation Service using Jinja2 templates.

Architecture Decision: Template Pattern
Allows users to customize reports without changing code.
"""

import datetime
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from driverlog.domain.models import WorkRecord
from driverlog.i18n import tr
from driverlog.services.aggregation_service import dashboard_stats, filter_and_group, ModeFilter
from driverlog.utils import format_currency, format_date, format_month_year, get_resource_path, mode_label, \
    record_summary


class ReportService:
    """
    Generates text reports from a record collection using Jinja2 templates.
    """

    def __init__(self, template_dir: Optional[Path] = None, currency_symbol: str = "£"):
        """
        Initialize the report service.

        Args:
            template_dir: Directory containing Jinja2 templates
            currency_symbol: Symbol used by the ``currency`` filter
        """
        if template_dir is None:
            template_dir = get_resource_path("resources/templates")

        self.template_dir = template_dir
        self.currency_symbol = currency_symbol

        # Setup Jinja2 environment
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True
        )

        # Add custom filters
        self.env.filters['currency'] = self._format_currency
        self.env.filters['format_date'] = format_date
        self.env.filters['month_label'] = format_month_year
        self.env.filters['mode_label'] = mode_label
        self.env.filters['summary'] = record_summary
        self.env.globals['tr'] = tr

    def _format_currency(self, value: Decimal) -> str:
        return format_currency(value, self.currency_symbol)

    def generate_report(self, template_name: str,
                        records: Sequence[WorkRecord],
                        year: int,
                        month: int,
                        output_file: Optional[Path] = None,
                        series_length: int = 7) -> str:
        """
        Generate a report for one calendar month.

        Args:
            template_name: Name of the template file (e.g., 'monthly_summary.txt')
            records: The full record collection
            year: Year of the reported month
            month: Month (1-12) of the reported month
            output_file: Optional file path to save the report
            series_length: Number of entries in the recent series

        Returns:
            The generated report as a string
        """
        period = f"{year:04d}-{month:02d}"
        # Any instant inside the month selects it as the "current" month
        stats = dashboard_stats(records, now=datetime.datetime(year, month, 1), series_length=series_length)
        groups = filter_and_group(records, ModeFilter.ALL, period)

        context = {
            'period': period,
            'stats': stats,
            'group': groups.get(period),
            'generated_at': datetime.datetime.now(),
        }

        template = self.env.get_template(template_name)
        report_content = template.render(**context)

        if output_file:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(report_content)

        return report_content

    def list_templates(self) -> List[str]:
        """List all available template files"""
        return sorted([f.name for f in self.template_dir.glob("*.txt")] +
                      [f.name for f in self.template_dir.glob("*.md")] +
                      [f.name for f in self.template_dir.glob("*.html")])
