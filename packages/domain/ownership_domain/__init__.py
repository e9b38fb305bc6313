"""Ownership Domain - fractional ownership of enterprises and their assets.

This package provides the core of the ownership ledger:
- Enterprise and asset registration
- Share allocation: funds → whole shares, never beyond issued capacity
- Per-entity investor ledgers kept equal to sold-share counters
- Investment history and ownership reporting blocks

The domain layer is designed to be:
- Storage-agnostic (tables are injected; in-memory by default)
- Testable (pure Python with Pydantic validation)
"""

from .schemas import *  # noqa: F403, F401
from .errors import (
    OwnershipError,
    InvalidArgumentError,
    NotFoundError,
    CapacityExceededError,
)
from .storage import KeyValueTable, InMemoryTable, OwnershipStore
from .registry import EnterpriseRegistry
from .allocation import Allocation, ShareAllocationEngine, shares_for_amount
from .config import OwnershipSettings, get_settings
from .observability import setup_logging
from .service import OwnershipService

__version__ = "0.1.0"
