"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Pydantic gives runtime validation when records come back from SQLite, a JSON
store or a backup file, and its discriminated unions model the two pay modes
as a closed set of variants keyed by ``mode``.

Derived values (total, tier label, route-id count) are computed fields so they
can never drift from the inputs they are derived from.
"""

import datetime
import re
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field

from driverlog.domain.pricing import MAX_COUNT, RouteCount, compute_daily_rate, compute_standard

MAX_PHOTOS = 3

RouteId = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=50)]


class WorkMode(str, Enum):
    """Persisted mode tags"""
    NORMAL = "NORMAL"
    DAILY = "DAILY"


def year_month_key(day: datetime.date) -> str:
    """'YYYY-MM' key used for grouping and month selection"""
    return f"{day.year:04d}-{day.month:02d}"


class RecordBase(BaseModel):
    """Fields shared by both pay modes. Records are immutable once built."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    date: datetime.date
    photo_references: Tuple[str, ...] = Field(default=(), max_length=MAX_PHOTOS)
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @property
    def year_month_key(self) -> str:
        return year_month_key(self.date)


class StandardRecord(RecordBase):
    """
    Pay-per-item day ("NORMAL").

    Parcels and collections are paid at fixed per-unit rates on a single route.
    """
    mode: Literal["NORMAL"] = "NORMAL"
    route_id: RouteId
    parcel_count: int = Field(default=0, ge=0, le=MAX_COUNT)
    collection_count: int = Field(default=0, ge=0, le=MAX_COUNT)

    @computed_field
    @property
    def total_value(self) -> Decimal:
        return compute_standard(self.parcel_count, self.collection_count)

    @property
    def route_ids(self) -> Tuple[str, ...]:
        return (self.route_id,)


class DailyRecord(RecordBase):
    """
    Flat daily-rate day ("DAILY").

    ``id_count`` is always the number of route ids; it is never stored or set
    on its own. For two-route days ``parcel_count`` is the combined volume that
    selects the pricing tier.
    """
    mode: Literal["DAILY"] = "DAILY"
    route_ids: Tuple[RouteId, ...] = Field(..., min_length=1, max_length=2)
    parcel_count: int = Field(default=0, ge=0, le=MAX_COUNT)

    @computed_field
    @property
    def id_count(self) -> RouteCount:
        return RouteCount(len(self.route_ids))

    @computed_field
    @property
    def total_value(self) -> Decimal:
        return compute_daily_rate(self.id_count, self.parcel_count).amount

    @computed_field
    @property
    def tier_label(self) -> str:
        return compute_daily_rate(self.id_count, self.parcel_count).tier_label


WorkRecord = Annotated[Union[StandardRecord, DailyRecord], Field(discriminator="mode")]


class RecordDraft(BaseModel):
    """
    Raw entry-form input, before validation and pricing.

    Counts are kept as typed by the user; they are only coerced when the draft
    is priced. There is deliberately no total field: totals always come from
    the pricing engine.
    """
    mode: WorkMode = WorkMode.NORMAL
    date: datetime.date = Field(default_factory=datetime.date.today)
    route_id: str = ""
    parcel_count: Union[int, str, None] = None
    collection_count: Union[int, str, None] = None

    # Daily mode only
    id_count: RouteCount = RouteCount.SINGLE
    second_route_id: str = ""

    photo_references: List[str] = Field(default_factory=list)


class Account(BaseModel):
    """The owner of a record collection (the current-user context)."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    username: str = Field(..., min_length=1, max_length=100)
    display_name: Optional[str] = None
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


def canonical_username(raw: str) -> str:
    """Usernames are case-insensitive and may not contain whitespace"""
    return re.sub(r"\s+", "", raw.strip().lower())


class UserPreferences(BaseModel):
    """
    User configuration and preferences.

    This allows users to customize behavior without touching code.
    """
    model_config = ConfigDict(from_attributes=True)

    language: str = Field(default="auto", description="UI language: 'en', 'pt', or 'auto' (detect from system)")
    currency_symbol: str = Field(default="£", description="Symbol used when displaying money")
    recent_series_length: int = Field(default=7, ge=1, description="Entries shown in the recent earnings chart")

    # Export settings
    export_directory: Optional[str] = None

    # Backup settings
    backup_directory: Optional[str] = Field(default=None, description="Custom backup directory path")
    backup_retention_count: int = Field(default=5, description="Number of backup files to keep")
