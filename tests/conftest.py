"""
Pytest configuration and fixtures.
"""

import datetime
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from driverlog.domain.models import DailyRecord, StandardRecord
from driverlog.i18n import set_language
from driverlog.infra.db import Base


@pytest.fixture(autouse=True)
def english():
    """Messages are asserted in English unless a test switches language"""
    set_language("en")
    yield
    set_language("en")


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a new session for a test"""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


def make_standard(day, route_id="R1", parcels=0, collections=0, created_at=None, **kwargs):
    """Build a StandardRecord for a 'YYYY-MM-DD' string or a date"""
    if isinstance(day, str):
        day = datetime.date.fromisoformat(day)
    return StandardRecord(
        date=day,
        route_id=route_id,
        parcel_count=parcels,
        collection_count=collections,
        created_at=created_at or datetime.datetime.combine(day, datetime.time(18, 0)),
        **kwargs,
    )


def make_daily(day, route_ids=("R1",), parcels=0, created_at=None, **kwargs):
    """Build a DailyRecord for a 'YYYY-MM-DD' string or a date"""
    if isinstance(day, str):
        day = datetime.date.fromisoformat(day)
    return DailyRecord(
        date=day,
        route_ids=tuple(route_ids),
        parcel_count=parcels,
        created_at=created_at or datetime.datetime.combine(day, datetime.time(18, 0)),
        **kwargs,
    )
