"""
Conversion between domain records and their persisted layout.

Every backend (SQL rows, JSON files, backups) stores the same flat shape:

    id, date, mode, route_ids, parcel_count, collection_count,
    total_value, tier_label, photo_references, created_at

``route_ids`` is always a list. The daily route-id count is never stored and
is rebuilt as ``len(route_ids)`` on load. Stored totals and tier labels are
written for interop but recomputed on load.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Mapping

from driverlog.domain.models import DailyRecord, StandardRecord, WorkMode, WorkRecord

logger = logging.getLogger(__name__)

PERSISTED_FIELDS = (
    "id", "date", "mode", "route_ids", "parcel_count", "collection_count",
    "total_value", "tier_label", "photo_references", "created_at",
)


def to_persisted(record: WorkRecord) -> Dict[str, Any]:
    """Flatten a record into the persisted layout (native Python values)"""
    row = {
        "id": record.id,
        "date": record.date,
        "mode": record.mode,
        "route_ids": list(record.route_ids),
        "parcel_count": record.parcel_count,
        "total_value": record.total_value,
        "photo_references": list(record.photo_references),
        "created_at": record.created_at,
    }
    if isinstance(record, StandardRecord):
        row.update(collection_count=record.collection_count, tier_label=None)
    elif isinstance(record, DailyRecord):
        row.update(collection_count=None, tier_label=record.tier_label)
    else:
        raise TypeError(f"Unknown record type: {type(record).__name__}")
    return row


def to_json_row(record: WorkRecord) -> Dict[str, Any]:
    """Persisted layout with JSON-safe scalars"""
    row = to_persisted(record)
    row["date"] = record.date.isoformat()
    row["created_at"] = record.created_at.isoformat()
    row["total_value"] = f"{record.total_value:.2f}"
    return row


def from_persisted(row: Mapping[str, Any]) -> WorkRecord:
    """
    Rebuild a record from its persisted layout.

    Raises:
        ValueError: unknown mode tag or malformed fields (pydantic's
            ValidationError is a ValueError)
    """
    mode = WorkMode(row["mode"])
    common = {
        "id": row.get("id"),
        "date": row["date"],
        "parcel_count": row.get("parcel_count") or 0,
        "photo_references": tuple(row.get("photo_references") or ()),
        "created_at": row["created_at"],
    }

    if mode is WorkMode.NORMAL:
        route_ids = row["route_ids"]
        if len(route_ids) != 1:
            raise ValueError(f"NORMAL record {row.get('id')} must have exactly one route id")
        record = StandardRecord(
            route_id=route_ids[0],
            collection_count=row.get("collection_count") or 0,
            **common,
        )
    else:
        record = DailyRecord(route_ids=tuple(row["route_ids"]), **common)

    stored_total = row.get("total_value")
    if stored_total is not None and Decimal(str(stored_total)) != record.total_value:
        logger.warning(
            f"Stored total {stored_total} for record {record.id} differs from computed "
            f"{record.total_value}; using computed value"
        )
    return record
