"""Failure taxonomy for ownership operations.

Every mutating operation either commits completely or raises one of these.
Lookups never raise for a missing entity; they return None (or 0 for
holdings).
"""

from typing import Optional


class OwnershipError(Exception):
    """Base class for all ownership ledger failures."""
    pass


class InvalidArgumentError(OwnershipError, ValueError):
    """Raised for an empty name, a non-positive numeric field or amount."""
    pass


class NotFoundError(OwnershipError, LookupError):
    """Raised when an enterprise or asset id does not resolve."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id={entity_id} not found")


class CapacityExceededError(OwnershipError):
    """Raised when a purchase would sell more shares than were issued."""

    def __init__(
        self,
        entity_id: str,
        requested: int,
        available: int,
        entity: Optional[str] = None,
    ):
        self.entity_id = entity_id
        self.requested = requested
        self.available = available
        self.entity = entity or "Entity"
        super().__init__(
            f"Not enough shares available in {self.entity.lower()} {entity_id}: "
            f"requested {requested}, available {available}"
        )
