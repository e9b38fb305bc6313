"""Share allocation engine: converts funds into shares and records ownership.

The same algorithm serves enterprise-level and asset-level investments; only
the storage path differs:

    1. Resolve the target (NotFoundError if missing)
    2. Validate amount > 0 and a non-blank investor id (InvalidArgumentError)
    3. shares = floor(amount / unit_price); the remainder is forfeited
    4. Reject with CapacityExceededError if sold + shares > total
    5. Increment shares_sold and credit the investor ledger together
    6. Write the enterprise record back (assets are stored inside it)

Steps 1-6 run under the enterprise's lock. The engine mutates a copy read
from the store and writes it back only after both counters are updated, so
a failure at any step leaves stored state untouched.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Any, Optional, Tuple

from .errors import CapacityExceededError, NotFoundError
from .schemas import Enterprise, OwnedEntity
from .storage import OwnershipStore
from .validation import require_name, require_positive_amount

logger = logging.getLogger(__name__)


def shares_for_amount(amount: Decimal, unit_price: Decimal) -> Tuple[int, Decimal]:
    """Whole shares an amount buys, and the part of the amount left over.

    Fractional shares are never sold. The leftover is not refunded and not
    credited anywhere.

    Example:
        shares_for_amount(Decimal("105"), Decimal("10"))  → (10, Decimal("5"))
        shares_for_amount(Decimal("125"), Decimal("50"))  → (2, Decimal("25"))
        shares_for_amount(Decimal("9"), Decimal("10"))    → (0, Decimal("9"))
    """
    shares = int((amount / unit_price).to_integral_value(rounding=ROUND_FLOOR))
    # Quotients of derived asset prices carry context rounding; never report
    # a negative leftover.
    remainder = max(amount - unit_price * shares, Decimal("0"))
    return shares, remainder


@dataclass(frozen=True)
class Allocation:
    """Outcome of one accepted investment."""

    enterprise_id: str
    asset_id: Optional[str]
    investor_id: str
    amount: Decimal
    unit_price: Decimal
    shares: int
    forfeited: Decimal
    holding_after: int
    shares_sold_after: int


class ShareAllocationEngine:
    """Sells shares of enterprises and assets against incoming funds.

    Example:
        engine = ShareAllocationEngine(store)
        allocation = engine.invest_in_enterprise("ent-1", "acme_fund", 105)
        allocation.shares      # 10 at price_per_share=10
        allocation.forfeited   # Decimal("5")
    """

    def __init__(self, store: OwnershipStore):
        self.store = store

    def invest_in_enterprise(self, enterprise_id: str, investor_id: Any, amount: Any) -> Allocation:
        """Buy enterprise shares at price_per_share."""
        with self.store.lock_for(enterprise_id):
            enterprise = self._load_enterprise(enterprise_id)
            allocation = self._allocate(enterprise, enterprise, None, investor_id, amount)
            self.store.enterprises.insert(enterprise_id, enterprise)
        self._log_allocation(allocation)
        return allocation

    def invest_in_asset(
        self,
        enterprise_id: str,
        asset_id: str,
        investor_id: Any,
        amount: Any,
    ) -> Allocation:
        """Buy asset shares at value_per_share.

        The asset is updated inside its enterprise's assets mapping, and the
        enterprise record is written back once.
        """
        with self.store.lock_for(enterprise_id):
            enterprise = self._load_enterprise(enterprise_id)
            asset = enterprise.get_asset(asset_id)
            if asset is None:
                raise NotFoundError("Asset", asset_id)
            allocation = self._allocate(enterprise, asset, asset_id, investor_id, amount)
            self.store.enterprises.insert(enterprise_id, enterprise)
        self._log_allocation(allocation)
        return allocation

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _load_enterprise(self, enterprise_id: str) -> Enterprise:
        enterprise = self.store.enterprises.get(enterprise_id)
        if enterprise is None:
            raise NotFoundError("Enterprise", enterprise_id)
        return enterprise

    def _allocate(
        self,
        enterprise: Enterprise,
        target: OwnedEntity,
        asset_id: Optional[str],
        investor_id: Any,
        amount: Any,
    ) -> Allocation:
        """Validate and apply one purchase to target (enterprise or asset).

        Mutates target in place; the caller persists the enterprise record.
        """
        amount = require_positive_amount(amount, "amount")
        investor_id = require_name(investor_id, "investor_id")

        unit_price = target.unit_price
        shares, forfeited = shares_for_amount(amount, unit_price)

        if shares > target.available_shares:
            entity = "Asset" if asset_id is not None else "Enterprise"
            logger.warning(
                "Rejected purchase of %d shares in %s %s: only %d available",
                shares, entity.lower(), target.id, target.available_shares,
                extra={
                    "enterprise_id": enterprise.id,
                    "asset_id": asset_id,
                    "investor_id": investor_id,
                    "shares": shares,
                },
            )
            raise CapacityExceededError(
                entity_id=target.id,
                requested=shares,
                available=target.available_shares,
                entity=entity,
            )

        # Ledger first: the assignment below re-validates that the ledger
        # total matches shares_sold.
        holding_after = target.investors.credit(investor_id, shares)
        target.shares_sold = target.shares_sold + shares

        if forfeited:
            logger.debug(
                "Forfeited %s of %s from %s (unit price %s)",
                forfeited, amount, investor_id, unit_price,
                extra={"enterprise_id": enterprise.id, "asset_id": asset_id, "investor_id": investor_id},
            )

        return Allocation(
            enterprise_id=enterprise.id,
            asset_id=asset_id,
            investor_id=investor_id,
            amount=amount,
            unit_price=unit_price,
            shares=shares,
            forfeited=forfeited,
            holding_after=holding_after,
            shares_sold_after=target.shares_sold,
        )

    def _log_allocation(self, allocation: Allocation) -> None:
        logger.info(
            "Investor %s bought %d shares of %s for %s",
            allocation.investor_id,
            allocation.shares,
            allocation.asset_id or allocation.enterprise_id,
            allocation.amount,
            extra={
                "enterprise_id": allocation.enterprise_id,
                "asset_id": allocation.asset_id,
                "investor_id": allocation.investor_id,
                "shares": allocation.shares,
            },
        )
