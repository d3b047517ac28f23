"""
Factory for creating the configured record store.

Architecture Decision: Factory Pattern
Instantiates the correct backend from settings so callers never import a
concrete store.
"""

from typing import Tuple

from driverlog.domain.models import Account, canonical_username
from driverlog.infra.config import Settings
from driverlog.infra.stores.base import RecordStore


async def open_record_store(settings: Settings, username: str) -> Tuple[RecordStore, Account]:
    """
    Create the configured record store and resolve the account using it.

    Returns:
        (store, account) for the given username
    """
    if settings.storage_backend == "json":
        from .json_store import JsonRecordStore
        store = JsonRecordStore(settings.records_dir, quota_bytes=settings.local_quota_bytes)
        return store, Account(username=canonical_username(username), display_name=username.strip())

    from driverlog.infra.db import init_db
    from driverlog.infra.repository import AccountRepository, SqlRecordStore
    await init_db(settings.get_db_url())
    account = await AccountRepository().get_or_create(username)
    return SqlRecordStore(), account
