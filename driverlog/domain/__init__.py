"""Domain layer - Pure business entities and logic"""

from .errors import DriverLogError, QuotaExceededError, StorageError, ValidationError
from .models import Account, DailyRecord, RecordDraft, StandardRecord, UserPreferences, WorkMode, WorkRecord
from .pricing import DailyRateQuote, RouteCount, compute_daily_rate, compute_standard
from .validation import quote_draft, validate_draft

__all__ = [
    "Account", "DailyRecord", "RecordDraft", "StandardRecord", "UserPreferences", "WorkMode", "WorkRecord",
    "DailyRateQuote", "RouteCount", "compute_daily_rate", "compute_standard",
    "quote_draft", "validate_draft",
    "DriverLogError", "QuotaExceededError", "StorageError", "ValidationError",
]
