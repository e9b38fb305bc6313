"""Workbook configuration - entry point for Excel export of ownership ledgers.

The WorkbookCFG ties together the enterprises to export and the display
options for the generated workbook. It is what gets passed to the Excel
renderer.
"""

from typing import List
from pydantic import Field, field_validator, model_validator

from .base import DomainModel
from .entities import Enterprise


class WorkbookCFG(DomainModel):
    """Top-level configuration for ownership workbook generation.

    Typical workflows:

    Single enterprise:
        config = WorkbookCFG(enterprises=[service.get_enterprise(enterprise_id)])

    Whole registry:
        config = WorkbookCFG(
            title="Q3 Ownership",
            enterprises=service.list_enterprises(),
            currency="EUR",
        )

    Generated sheets (depending on config):
        1. Summary - one row per enterprise with sold/available shares
        2. Enterprise (one per enterprise) - header block, investor ledger,
           asset table and per-asset holdings
    """

    title: str = Field(
        default="Ownership Ledger",
        min_length=1,
        description="Title written at the top of the summary sheet"
    )

    enterprises: List[Enterprise] = Field(
        description="Enterprise snapshots to export (one sheet each)"
    )

    currency: str = Field(
        default="USD",
        description="ISO 4217 code used in money number formats"
    )

    include_summary_sheet: bool = Field(
        default=True,
        description="Include a summary sheet listing every enterprise"
    )

    include_asset_holdings: bool = Field(
        default=True,
        description="Include per-asset investor holdings below the asset table"
    )

    @field_validator("currency")
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Validate currency code is uppercase 3-letter ISO 4217 code."""
        if not v.isupper() or len(v) != 3:
            raise ValueError(f"Currency must be 3-letter uppercase ISO 4217 code, got: {v}")
        return v

    @model_validator(mode="after")
    def validate_unique_enterprises(self):
        """The same enterprise must not be exported twice."""
        seen = set()
        for enterprise in self.enterprises:
            if enterprise.id in seen:
                raise ValueError(f"Enterprise {enterprise.id} listed more than once")
            seen.add(enterprise.id)
        return self
