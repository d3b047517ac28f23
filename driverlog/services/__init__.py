"""Services layer - Business logic"""

from .backup_service import BackupService
from .excel_report_service import ExcelReportService
from .ledger_service import RecordLedger
from .report_service import ReportService

__all__ = ["BackupService", "ExcelReportService", "RecordLedger", "ReportService"]
