"""Enterprise and asset models.

An Enterprise is the top-level fractionally-owned business. Assets are
sub-entities owned by value inside the enterprise's ``assets`` mapping; each
asset keeps a back-reference (``enterprise_id``) used purely as a lookup key.

Both kinds of entity share the same ownership mechanics: a fixed number of
issued shares, a sold-share counter and an investor ledger whose balances
always add up to that counter.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from pydantic import Field, field_validator, model_validator

from .base import (
    DomainModel,
    EnterpriseId,
    AssetId,
    IssuedShares,
    ShareCount,
    UnitPrice,
    MoneyAmount,
)
from .ledger import InvestorLedger


# =============================================================================
# Shared ownership fields
# =============================================================================

class OwnedEntity(DomainModel, ABC):
    """Fields and checks common to enterprises and assets.

    Invariants (validated on creation and on every assignment):
        - 0 <= shares_sold <= total_shares
        - investors.total_shares() == shares_sold
    """

    name: str = Field(
        min_length=1,
        description="Display name (non-blank, immutable after creation)"
    )

    total_shares: IssuedShares = Field(
        description="Total issuable shares"
    )

    shares_sold: ShareCount = Field(
        default=0,
        description="Shares sold so far; only the allocation engine changes this"
    )

    investors: InvestorLedger = Field(
        default_factory=InvestorLedger,
        description="Cumulative shares held per investor"
    )

    created_at: Optional[datetime] = Field(
        default=None,
        description="Registration timestamp from the injected clock"
    )

    @field_validator("name")
    @classmethod
    def validate_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    @model_validator(mode="after")
    def validate_share_counters(self):
        """Ledger and sold-share counter must never diverge."""
        if self.shares_sold > self.total_shares:
            raise ValueError(
                f"shares_sold ({self.shares_sold}) exceeds total_shares ({self.total_shares})"
            )
        ledger_total = self.investors.total_shares()
        if ledger_total != self.shares_sold:
            raise ValueError(
                f"Investor ledger holds {ledger_total} shares but shares_sold is {self.shares_sold}"
            )
        return self

    @property
    def available_shares(self) -> int:
        """Remaining sellable shares (capacity)."""
        return self.total_shares - self.shares_sold

    @property
    @abstractmethod
    def unit_price(self) -> Decimal:
        """Price of one share, used to convert funds into a share count."""
        pass

    def is_sold_out(self) -> bool:
        return self.shares_sold == self.total_shares


# =============================================================================
# Asset
# =============================================================================

class Asset(OwnedEntity):
    """A fractionally-owned asset nested under exactly one enterprise.

    value_per_share is derived once at registration as
    declared_value / total_shares (real division, no truncation) and is
    never re-derived afterwards.

    Example:
        Oven registered with declared_value=5000 and total_shares=100
        → value_per_share = 50
        → investing 125 buys floor(125 / 50) = 2 shares
    """

    id: AssetId
    enterprise_id: EnterpriseId = Field(
        description="Owning enterprise (lookup key, not an ownership relation)"
    )

    declared_value: MoneyAmount = Field(
        description="Value declared at registration"
    )

    value_per_share: UnitPrice = Field(
        description="declared_value / total_shares"
    )

    @property
    def unit_price(self) -> Decimal:
        return self.value_per_share


# =============================================================================
# Enterprise
# =============================================================================

class Enterprise(OwnedEntity):
    """A fractionally-owned business and the assets it owns.

    Example:
        Enterprise(id="ent-1", name="Cafe", total_shares=100, price_per_share=10)
        → investing 105 buys 10 shares; the remaining 5 is forfeited
    """

    id: EnterpriseId

    price_per_share: UnitPrice = Field(
        description="Price of one enterprise share"
    )

    assets: Dict[str, Asset] = Field(
        default_factory=dict,
        description="Owned assets (asset id -> Asset)"
    )

    @model_validator(mode="after")
    def validate_asset_back_references(self):
        """Every nested asset must point back at this enterprise under its own id."""
        for asset_id, asset in self.assets.items():
            if asset.id != asset_id:
                raise ValueError(f"Asset keyed as {asset_id} has id {asset.id}")
            if asset.enterprise_id != self.id:
                raise ValueError(
                    f"Asset {asset_id} belongs to enterprise {asset.enterprise_id}, not {self.id}"
                )
        return self

    @property
    def unit_price(self) -> Decimal:
        return self.price_per_share

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self.assets.get(asset_id)
