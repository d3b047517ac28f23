"""
Export Formatter.

Serializes records to comma-separated text with a fixed column schema:

    Date,Mode,RouteIds,ParcelCount,CollectionCount,TotalValue

Rows keep the caller's order. RouteIds is always wrapped in double quotes;
no other field is escaped, so a comma inside any other value would shift the
columns. That is a known limitation of the format, kept for compatibility
with files already produced.
"""

import datetime
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from driverlog.domain.models import DailyRecord, StandardRecord, WorkRecord

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Date", "Mode", "RouteIds", "ParcelCount", "CollectionCount", "TotalValue"]
ROUTE_SEPARATOR = " + "
NO_COLLECTIONS = "-"


def export_row(record: WorkRecord) -> List[str]:
    """Field values for one record, in column order"""
    if isinstance(record, StandardRecord):
        route_ids = record.route_id
        collections = str(record.collection_count)
    elif isinstance(record, DailyRecord):
        route_ids = ROUTE_SEPARATOR.join(record.route_ids)
        collections = NO_COLLECTIONS
    else:
        raise TypeError(f"Unknown record type: {type(record).__name__}")

    return [
        record.date.isoformat(),
        record.mode,
        f'"{route_ids}"',
        str(record.parcel_count),
        collections,
        f"{record.total_value:.2f}",
    ]


def to_delimited_text(records: Iterable[WorkRecord]) -> str:
    """Header row followed by one row per record, newline separated"""
    lines = [",".join(EXPORT_COLUMNS)]
    lines.extend(",".join(export_row(r)) for r in records)
    return "\n".join(lines)


def export_filename(today: Optional[datetime.date] = None) -> str:
    """Default file name for an export, e.g. driver_log_2024-02-15.csv"""
    today = today or datetime.date.today()
    return f"driver_log_{today.isoformat()}.csv"


def write_export(records: Iterable[WorkRecord], directory: Path,
                 today: Optional[datetime.date] = None) -> Path:
    """Write the export text into a directory under the default file name"""
    directory.mkdir(parents=True, exist_ok=True)
    output_file = directory / export_filename(today)
    with open(output_file, 'w', encoding='utf-8', newline='') as f:
        f.write(to_delimited_text(records))
    logger.info(f"Export written: {output_file}")
    return output_file
