"""Key-value storage used by the registry and the allocation engine.

Storage is injected rather than global: services receive an OwnershipStore,
and tests use the in-memory implementation.

Tables:
    - enterprises: enterprise id -> Enterprise (assets live inside the record)
    - investments: record id -> InvestmentRecord

Each table only needs point lookups, inserts and iteration. Anything backed
by a durable key-value store can implement KeyValueTable.
"""

import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterator, Optional, TypeVar

from .errors import NotFoundError
from .schemas import Enterprise, InvestmentRecord

logger = logging.getLogger(__name__)

V = TypeVar("V")


# =============================================================================
# Table interface
# =============================================================================

class KeyValueTable(ABC, Generic[V]):
    """A logical table of the backing store."""

    @abstractmethod
    def insert(self, key: str, value: V) -> None:
        """Insert or overwrite the value stored under key."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        """Return the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def values(self) -> Iterator[V]:
        """Iterate over all stored values in insertion order."""
        pass

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


class InMemoryTable(KeyValueTable[V]):
    """Dictionary-backed table.

    Values are deep-copied on the way in and on the way out, so a caller
    mutating a fetched object never changes stored state until it inserts
    the object back. This is the same contract a serializing store gives.
    """

    def __init__(self, name: str):
        self.name = name
        self._rows: Dict[str, V] = {}

    def insert(self, key: str, value: V) -> None:
        self._rows[key] = copy.deepcopy(value)

    def get(self, key: str) -> Optional[V]:
        value = self._rows.get(key)
        if value is None:
            return None
        return copy.deepcopy(value)

    def values(self) -> Iterator[V]:
        for value in list(self._rows.values()):
            yield copy.deepcopy(value)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"InMemoryTable(name={self.name!r}, rows={len(self._rows)})"


# =============================================================================
# Store
# =============================================================================

class OwnershipStore:
    """Groups the tables the ownership core reads and writes.

    Also hands out one re-entrant lock per enterprise. Every read-validate-
    write sequence on an enterprise record (asset registration, enterprise
    investment, asset investment) runs while holding that lock. Assets are
    stored inside their enterprise's record, so the enterprise lock covers
    them too.

    Example:
        store = OwnershipStore()                      # in-memory tables
        store = OwnershipStore(enterprises=MyTable("enterprises"),
                               investments=MyTable("investments"))
    """

    def __init__(
        self,
        enterprises: Optional[KeyValueTable[Enterprise]] = None,
        investments: Optional[KeyValueTable[InvestmentRecord]] = None,
    ):
        self.enterprises: KeyValueTable[Enterprise] = (
            enterprises if enterprises is not None else InMemoryTable("enterprises")
        )
        self.investments: KeyValueTable[InvestmentRecord] = (
            investments if investments is not None else InMemoryTable("investments")
        )
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, enterprise_id: str) -> threading.RLock:
        """Return the lock serializing mutations of one enterprise record.

        Locks exist only for stored enterprises. Enterprises are never
        deleted, so an id that resolves once keeps resolving while the
        lock is held.

        Raises:
            NotFoundError: If enterprise_id is not in the enterprises table
        """
        with self._locks_guard:
            lock = self._locks.get(enterprise_id)
            if lock is None:
                if enterprise_id not in self.enterprises:
                    raise NotFoundError("Enterprise", enterprise_id)
                lock = threading.RLock()
                self._locks[enterprise_id] = lock
                logger.debug("Created lock for enterprise %s", enterprise_id)
            return lock
