"""
Base class for record stores.

Architecture Decision: Strategy Pattern + Factory Pattern
Defines the interface every persistence backend must follow. The ledger and
services only ever talk to this interface, so a hosted backend can replace
the local ones without touching them.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from driverlog.domain.models import Account, WorkRecord


class RecordStore(ABC):
    """
    Abstract record store keyed by owning account.

    Implementations assign ``id`` and ``created_at`` on create, and raise
    StorageError (or QuotaExceededError) on any failure.
    """

    @abstractmethod
    async def list_records(self, account: Account) -> List[WorkRecord]:
        """All records owned by the account, newest first"""

    @abstractmethod
    async def create(self, account: Account, record: WorkRecord) -> WorkRecord:
        """Persist a validated record and return it as stored"""

    @abstractmethod
    async def delete(self, account: Account, record_id: str) -> None:
        """Delete one of the account's records"""

    @abstractmethod
    async def replace_all(self, account: Account, records: Sequence[WorkRecord]) -> int:
        """
        Atomically swap the account's records for ``records`` (given new ids).

        Either every record is stored or the previous collection is left
        untouched. Returns how many records were removed.
        """
