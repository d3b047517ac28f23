"""
Record Ledger - the application shell's copy of the record collection.

Architecture Decision: Explicit ownership
The ledger owns the in-memory collection for one account and is the only
thing that changes it. Aggregation and export functions receive a snapshot
(``ledger.records``) by value. Persistence is an explicit store call made by
the ledger, never a side effect of changing the in-memory list.

Deletes are optimistic: the record disappears locally first, then the store
is asked to delete it. If that fails the ledger re-fetches the authoritative
collection instead of trying to undo its own change, and the error is
re-raised so the user sees it. Between those two steps the local view can
briefly disagree with the store.
"""

import logging
from typing import List, Optional, Tuple

from driverlog.domain.errors import StorageError
from driverlog.domain.models import Account, RecordDraft, WorkRecord
from driverlog.domain.validation import validate_draft
from driverlog.i18n import tr
from driverlog.infra.photo_store import PhotoStore
from driverlog.infra.stores.base import RecordStore

logger = logging.getLogger(__name__)


class RecordLedger:
    """
    In-memory record collection for one account, backed by a RecordStore.
    """

    def __init__(self, store: RecordStore, account: Account, photo_store: Optional[PhotoStore] = None):
        self.store = store
        self.account = account
        self.photo_store = photo_store
        self._records: List[WorkRecord] = []

    @property
    def records(self) -> Tuple[WorkRecord, ...]:
        """Snapshot of the collection, newest entries first"""
        return tuple(self._records)

    def find(self, record_id: str) -> Optional[WorkRecord]:
        return next((r for r in self._records if r.id == record_id), None)

    async def refresh(self) -> Tuple[WorkRecord, ...]:
        """Replace the local collection with the store's"""
        self._records = list(await self.store.list_records(self.account))
        return self.records

    async def add_draft(self, draft: RecordDraft) -> WorkRecord:
        """
        Validate, price and persist a draft.

        Raises:
            ValidationError: the draft was rejected; nothing is stored
            StorageError: the store failed; the local collection is unchanged
        """
        record = validate_draft(draft)
        stored = await self.store.create(self.account, record)
        self._records.insert(0, stored)
        logger.info(f"Created {stored.mode} record {stored.id} for {stored.date} ({stored.total_value})")
        return stored

    async def delete(self, record_id: str) -> None:
        """
        Optimistically delete a record, reconciling with the store on failure.

        Raises:
            StorageError: the store rejected the delete; the local collection
                has been re-fetched from the store, or put back as it was if
                that re-fetch failed too
        """
        previous = list(self._records)
        removed = self.find(record_id)
        self._records = [r for r in self._records if r.id != record_id]

        try:
            await self.store.delete(self.account, record_id)
        except StorageError:
            logger.warning(f"Delete of record {record_id} failed; re-fetching records")
            try:
                await self.refresh()
            except StorageError as refresh_error:
                logger.error(f"Re-fetch after failed delete of {record_id} failed: {refresh_error.message}")
                self._records = previous
            raise

        logger.info(f"Deleted record {record_id}")
        if removed and self.photo_store:
            for reference in removed.photo_references:
                self.photo_store.remove(reference)

    def attach_photo(self, data: bytes, suffix: str = ".jpg") -> str:
        """Upload a photo receipt and return the reference to put on a draft"""
        if self.photo_store is None:
            raise StorageError(tr("storage.no_photo_store"))
        return self.photo_store.upload(data, suffix)
