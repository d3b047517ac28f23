"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
Separates data access logic from business logic. Makes it easy to:
- Switch database implementations
- Mock data for testing
- Change data sources (local DB to a hosted backend)

Every SQLAlchemy failure leaves this module as a StorageError so callers only
have to handle the domain error taxonomy.
"""

import uuid
from contextlib import asynccontextmanager
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from driverlog.domain.errors import StorageError
from driverlog.domain.models import Account, WorkRecord, canonical_username
from driverlog.i18n import tr
from driverlog.infra.db import AccountModel, WorkRecordModel, get_engine
from driverlog.infra.mapping import PERSISTED_FIELDS, from_persisted, to_persisted
from driverlog.infra.stores.base import RecordStore


@asynccontextmanager
async def storage_errors():
    """Translate database failures into StorageError"""
    try:
        yield
    except (SQLAlchemyError, ValueError) as e:
        raise StorageError(tr("storage.unavailable", details=str(e))) from e


class AccountRepository:
    """
    Handles Account persistence.

    Accounts are the opaque "current user" context that owns records.
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    async def get_by_username(self, username: str) -> Optional[Account]:
        """Get an account by (case-insensitive) username"""
        session = await self._get_session()
        async with storage_errors(), session:
            result = await session.execute(
                select(AccountModel).where(AccountModel.username == canonical_username(username))
            )
            model = result.scalar_one_or_none()
            return Account.model_validate(model) if model else None

    async def get_or_create(self, username: str, display_name: Optional[str] = None) -> Account:
        """Resolve a username to its account, creating it on first use"""
        existing = await self.get_by_username(username)
        if existing:
            return existing

        session = await self._get_session()
        async with storage_errors(), session:
            model = AccountModel(
                username=canonical_username(username),
                display_name=display_name or username.strip(),
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return Account.model_validate(model)


class SqlRecordStore(RecordStore):
    """
    Handles all WorkRecord-related database operations.

    Converts between domain models (Pydantic) and ORM models (SQLAlchemy).
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    @staticmethod
    def _to_domain(model: WorkRecordModel) -> WorkRecord:
        return from_persisted({name: getattr(model, name) for name in PERSISTED_FIELDS})

    async def list_records(self, account: Account) -> List[WorkRecord]:
        """All records owned by the account, newest first"""
        session = await self._get_session()
        async with storage_errors(), session:
            result = await session.execute(
                select(WorkRecordModel)
                .where(WorkRecordModel.owner_id == account.id)
                .order_by(WorkRecordModel.date.desc(), WorkRecordModel.created_at.desc())
            )
            return [self._to_domain(m) for m in result.scalars().all()]

    async def create(self, account: Account, record: WorkRecord) -> WorkRecord:
        """Create a new record; the store assigns its id"""
        row = to_persisted(record)
        row["id"] = str(uuid.uuid4())

        session = await self._get_session()
        async with storage_errors(), session:
            model = WorkRecordModel(owner_id=account.id, **row)
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._to_domain(model)

    async def delete(self, account: Account, record_id: str) -> None:
        """Delete a record by ID"""
        session = await self._get_session()
        async with storage_errors(), session:
            result = await session.execute(
                delete(WorkRecordModel).where(
                    WorkRecordModel.id == record_id,
                    WorkRecordModel.owner_id == account.id,
                )
            )
            await session.commit()
            if result.rowcount == 0:
                raise StorageError(tr("storage.record_not_found", record_id=record_id))

    async def replace_all(self, account: Account, records: Sequence[WorkRecord]) -> int:
        """Delete and re-insert the account's records in one transaction"""
        session = await self._get_session()
        async with storage_errors(), session:
            try:
                result = await session.execute(
                    delete(WorkRecordModel).where(WorkRecordModel.owner_id == account.id)
                )
                for record in records:
                    row = to_persisted(record)
                    row["id"] = str(uuid.uuid4())
                    session.add(WorkRecordModel(owner_id=account.id, **row))
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                raise
            return result.rowcount
