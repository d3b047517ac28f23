"""
SQLAlchemy database models and configuration.

Architecture Decision: Why SQLAlchemy?
- Provides ORM for cleaner code and prevents SQL injection
- Supports async operations so storage calls never block the caller
- Easy to point at PostgreSQL or another hosted backend if needed

Persisted record layout: ``mode`` holds the literal tag (NORMAL/DAILY) and
``route_ids`` is always a JSON list, even for single-route NORMAL records.
The daily route-id count is not a column; it is rebuilt from the list length.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Base class for all models
class Base(DeclarativeBase):
    pass


class AccountModel(Base):
    """SQLAlchemy model for Account entity"""
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.now, nullable=False)


class WorkRecordModel(Base):
    """SQLAlchemy model for a logged work day"""
    __tablename__ = "work_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    mode: Mapped[str] = mapped_column(String(10), nullable=False)
    route_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False)
    parcel_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    collection_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tier_label: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    photo_references: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=dt.datetime.now, nullable=False)


class DatabaseEngine:
    """
    Manages database connection and session lifecycle.

    Singleton pattern ensures only one engine exists per application.
    """
    _instance: Optional['DatabaseEngine'] = None

    def __init__(self, db_url: str):
        self.engine = create_async_engine(db_url, echo=False)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @classmethod
    def get_instance(cls, db_url: Optional[str] = None) -> 'DatabaseEngine':
        """Get or create the database engine instance"""
        if cls._instance is None:
            if db_url is None:
                from driverlog.infra.config import get_settings
                db_url = get_settings().get_db_url()
            cls._instance = cls(db_url)
        return cls._instance

    @classmethod
    async def reset_instance(cls):
        """Dispose the current engine so the next call builds a new one"""
        if cls._instance is not None:
            await cls._instance.engine.dispose()
            cls._instance = None

    async def create_tables(self):
        """Create all tables in the database"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def get_session(self) -> AsyncSession:
        """Get a new database session"""
        return self.session_factory()


# Convenience functions
def get_engine(db_url: Optional[str] = None) -> DatabaseEngine:
    """Get the database engine instance"""
    return DatabaseEngine.get_instance(db_url)


async def init_db(db_url: Optional[str] = None):
    """Initialize the database (create tables)"""
    engine = get_engine(db_url)
    await engine.create_tables()
