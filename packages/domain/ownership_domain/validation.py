"""Argument checks shared by the registry and the allocation engine.

Each helper returns the normalized value or raises InvalidArgumentError, so
invalid input is rejected before any record is read or written.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import InvalidArgumentError


def require_name(value: Any, field: str = "name") -> str:
    """Return value if it is a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{field} must be a non-empty string, got {value!r}")
    return value


def require_positive_int(value: Any, field: str) -> int:
    """Return value if it is an int greater than zero (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidArgumentError(f"{field} must be greater than 0, got {value}")
    return value


def require_positive_amount(value: Any, field: str) -> Decimal:
    """Convert value to Decimal and check it is finite and greater than zero.

    Floats go through str() so that 10.1 becomes Decimal("10.1") rather than
    its binary expansion.

    Example:
        require_positive_amount(105, "amount")       → Decimal("105")
        require_positive_amount("12.50", "amount")   → Decimal("12.50")
        require_positive_amount(0, "amount")         → InvalidArgumentError
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field} must be a number, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidArgumentError(f"{field} must be a number, got {value!r}") from e

    if not amount.is_finite():
        raise InvalidArgumentError(f"{field} must be finite, got {value!r}")
    if amount <= 0:
        raise InvalidArgumentError(f"{field} must be greater than 0, got {value}")
    return amount
