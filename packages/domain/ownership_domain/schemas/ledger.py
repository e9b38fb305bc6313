"""Investor ledger: cumulative shares held per investor in one entity.

Every enterprise and every asset carries its own ledger. The ledger is only
ever credited; there is no debit or transfer.
"""

from decimal import Decimal
from typing import Dict, List
from pydantic import Field

from ..errors import InvalidArgumentError
from .base import DomainModel, ShareCount


class InvestorLedger(DomainModel):
    """Mapping of investor id to cumulative shares held.

    Example:
        ledger = InvestorLedger()
        ledger.credit("acme_fund", 30)
        ledger.credit("acme_fund", 20)
        ledger.holding("acme_fund")   # 50
        ledger.holding("nobody")      # 0
    """

    holdings: Dict[str, ShareCount] = Field(
        default_factory=dict,
        description="Investor id -> cumulative shares held"
    )

    def credit(self, investor_id: str, shares: int) -> int:
        """Add shares to an investor's balance, in place.

        Args:
            investor_id: Investor receiving the shares
            shares: Number of shares to add (must be >= 0)

        Returns:
            The investor's new balance

        Raises:
            InvalidArgumentError: If shares is negative

        Note:
            Crediting zero shares leaves the ledger untouched, so investors
            whose funds bought nothing never appear with a zero balance.
        """
        if shares < 0:
            raise InvalidArgumentError(
                f"Cannot credit a negative share count ({shares}) to {investor_id}"
            )
        if shares == 0:
            return self.holding(investor_id)

        self.holdings[investor_id] = self.holdings.get(investor_id, 0) + shares
        return self.holdings[investor_id]

    def holding(self, investor_id: str) -> int:
        """Return shares held by an investor (0 if unseen)."""
        return self.holdings.get(investor_id, 0)

    def total_shares(self) -> int:
        """Sum of all balances. Always equals the owning entity's shares_sold."""
        return sum(self.holdings.values())

    def investor_ids(self) -> List[str]:
        return list(self.holdings.keys())

    def ownership_percentage(self, investor_id: str) -> Decimal:
        """Investor's share of all sold shares as a decimal (0.25 = 25%).

        Returns Decimal("0") when nothing has been sold yet.
        """
        total = self.total_shares()
        if total == 0:
            return Decimal("0")
        return Decimal(self.holding(investor_id)) / Decimal(total)

    def __contains__(self, investor_id: object) -> bool:
        return investor_id in self.holdings
