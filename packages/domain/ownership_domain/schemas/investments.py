"""Investment records: the append-only history of accepted purchases.

A record is written after the entity commit succeeds, one per accepted
investment. Rejected investments leave no record.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator

from .base import (
    DomainModel,
    RecordId,
    EnterpriseId,
    AssetId,
    InvestorId,
    MoneyAmount,
    ShareCount,
    UnitPrice,
)


class InvestmentRecord(DomainModel):
    """One accepted investment into an enterprise or one of its assets.

    Examples:
        Enterprise investment (price 10, amount 105):
            asset_id=None
            shares_purchased=10
            forfeited_amount=5   (never refunded, never credited)

        Asset investment (value_per_share 50, amount 125):
            asset_id="asset-1"
            shares_purchased=2
            forfeited_amount=25
    """

    record_id: RecordId
    enterprise_id: EnterpriseId
    asset_id: Optional[AssetId] = Field(
        default=None,
        description="Target asset; None for enterprise-level investments"
    )
    investor_id: InvestorId

    amount: MoneyAmount = Field(
        description="Funds supplied by the investor"
    )

    unit_price: UnitPrice = Field(
        description="price_per_share or value_per_share at the time of purchase"
    )

    shares_purchased: ShareCount

    forfeited_amount: MoneyAmount = Field(
        default=Decimal("0"),
        description="Part of amount that did not cover a whole share"
    )

    currency: str = Field(
        default="USD",
        description="ISO 4217 code of amount"
    )

    recorded_at: datetime

    @field_validator("currency")
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Validate currency code is uppercase 3-letter ISO 4217 code."""
        if not v.isupper() or len(v) != 3:
            raise ValueError(f"Currency must be 3-letter uppercase ISO 4217 code, got: {v}")
        return v

    @property
    def is_asset_investment(self) -> bool:
        return self.asset_id is not None

    @property
    def invested_amount(self) -> Decimal:
        """Portion of amount actually converted into shares."""
        return self.amount - self.forfeited_amount
