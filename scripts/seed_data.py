"""
Data Seeder for Driver Log.
Populates the configured store with realistic records for testing and demo purposes.

Usage:
    python scripts/seed_data.py [username] [days]
"""

import asyncio
import random
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from driverlog.domain.models import RecordDraft, WorkMode
from driverlog.domain.pricing import RouteCount
from driverlog.infra.config import get_settings
from driverlog.infra.db import DatabaseEngine
from driverlog.infra.stores import open_record_store
from driverlog.services.ledger_service import RecordLedger

ROUTES = ["DLV1", "DLV2", "NTH4", "STH7", "EST3"]


def demo_draft(day: date) -> RecordDraft:
    """One working day: mostly per-item, sometimes a daily rate over one or two routes"""
    if random.random() < 0.7:
        return RecordDraft(
            mode=WorkMode.NORMAL,
            date=day,
            route_id=random.choice(ROUTES),
            parcel_count=random.randint(80, 220),
            collection_count=random.randint(0, 25),
        )

    routes = random.sample(ROUTES, 2)
    id_count = random.choice([RouteCount.SINGLE, RouteCount.DOUBLE])
    return RecordDraft(
        mode=WorkMode.DAILY,
        date=day,
        id_count=id_count,
        route_id=routes[0],
        second_route_id=routes[1] if id_count is RouteCount.DOUBLE else "",
        parcel_count=random.randint(100, 320),
    )


async def seed(username: str, days: int):
    settings = get_settings()
    print(f"Seeding {days} days for '{username}' ({settings.storage_backend} backend)...")

    try:
        store, account = await open_record_store(settings, username)
        ledger = RecordLedger(store, account)
        await ledger.refresh()
        existing = {r.date for r in ledger.records}

        today = date.today()
        created = 0
        for offset in range(days, 0, -1):
            day = today - timedelta(days=offset)
            # Sundays off
            if day.weekday() == 6 or day in existing:
                continue
            await ledger.add_draft(demo_draft(day))
            created += 1
    finally:
        await DatabaseEngine.reset_instance()

    print(f"Seeding complete. {created} records created.")


if __name__ == "__main__":
    user = sys.argv[1] if len(sys.argv) > 1 else get_settings().default_user
    day_count = int(sys.argv[2]) if len(sys.argv) > 2 else 60
    asyncio.run(seed(user, day_count))
