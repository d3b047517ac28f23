"""
Draft validation.

Turns raw entry-form input into a priced, immutable record or rejects it with
a message the user can act on. Route ids are canonicalized to upper case and
totals are always computed here, never taken from the caller.
"""

import datetime
from typing import Optional, Union

import pydantic

from driverlog.domain.errors import ValidationError
from driverlog.domain.models import MAX_PHOTOS, DailyRecord, RecordDraft, StandardRecord, WorkMode
from driverlog.domain.pricing import (
    MAX_COUNT, DailyRateQuote, RouteCount, coerce_count, compute_daily_rate, compute_standard,
)
from driverlog.i18n import tr


def quote_draft(draft: RecordDraft) -> DailyRateQuote:
    """
    Live total for a draft being edited.

    Safe to call on every keystroke: route ids are not checked and bad counts
    price as zero. Standard drafts have no tier, so the label is empty.
    """
    if draft.mode is WorkMode.NORMAL:
        return DailyRateQuote(compute_standard(draft.parcel_count, draft.collection_count), "")
    return compute_daily_rate(draft.id_count, draft.parcel_count)


def _count(value, field: str) -> int:
    count = coerce_count(value)
    if count < 0:
        raise ValidationError(tr("validation.negative_count", field=tr(f"field.{field}")), field=field)
    if count > MAX_COUNT:
        message = tr("validation.count_too_large", field=tr(f"field.{field}"), max=MAX_COUNT)
        raise ValidationError(message, field=field)
    return count


def validate_draft(draft: RecordDraft,
                   now: Optional[datetime.datetime] = None) -> Union[StandardRecord, DailyRecord]:
    """
    Validate a draft and build the record it describes.

    Args:
        draft: Raw form input
        now: Creation instant to stamp on the record (defaults to now)

    Returns:
        A StandardRecord or DailyRecord with its total (and tier) computed

    Raises:
        ValidationError: when a required route id is missing, a count is
            negative or above MAX_COUNT, or too many photos are attached
    """
    created_at = now or datetime.datetime.now()

    if len(draft.photo_references) > MAX_PHOTOS:
        raise ValidationError(tr("validation.too_many_photos", max=MAX_PHOTOS), field="photo_references")

    first_route = draft.route_id.strip()
    parcels = _count(draft.parcel_count, "parcel_count")

    try:
        if draft.mode is WorkMode.NORMAL:
            if not first_route:
                raise ValidationError(tr("validation.route_id_required"), field="route_id")
            return StandardRecord(
                date=draft.date,
                route_id=first_route,
                parcel_count=parcels,
                collection_count=_count(draft.collection_count, "collection_count"),
                photo_references=tuple(draft.photo_references),
                created_at=created_at,
            )

        if draft.mode is WorkMode.DAILY:
            if not first_route:
                raise ValidationError(tr("validation.first_route_id_required"), field="route_id")
            route_ids = [first_route]
            if draft.id_count is RouteCount.DOUBLE:
                second_route = draft.second_route_id.strip()
                if not second_route:
                    raise ValidationError(tr("validation.second_route_id_required"), field="second_route_id")
                route_ids.append(second_route)
            return DailyRecord(
                date=draft.date,
                route_ids=tuple(route_ids),
                parcel_count=parcels,
                photo_references=tuple(draft.photo_references),
                created_at=created_at,
            )
    except pydantic.ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise ValidationError(tr("validation.invalid_record", details=errors)) from e

    raise TypeError(f"Unknown work mode: {draft.mode!r}")
