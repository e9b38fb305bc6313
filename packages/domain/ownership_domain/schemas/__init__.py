"""Ownership domain schemas.

This package contains all Pydantic models for the ownership domain layer:
- Base types and conventions
- Investor ledgers
- Enterprises and their nested assets
- Investment records (purchase history)
- Workbook configuration

Usage:
    from ownership_domain.schemas import (
        Enterprise, Asset, InvestorLedger, InvestmentRecord, WorkbookCFG
    )
"""

# Base types
from .base import (
    DomainModel,
    ShareCount,
    IssuedShares,
    MoneyAmount,
    UnitPrice,
    EnterpriseId,
    AssetId,
    InvestorId,
    RecordId,
)

# Ledger
from .ledger import InvestorLedger

# Entities
from .entities import (
    OwnedEntity,
    Enterprise,
    Asset,
)

# Investment history
from .investments import InvestmentRecord

# Workbook
from .workbook import WorkbookCFG

__all__ = [
    # Base types
    "DomainModel",
    "ShareCount",
    "IssuedShares",
    "MoneyAmount",
    "UnitPrice",
    "EnterpriseId",
    "AssetId",
    "InvestorId",
    "RecordId",
    # Ledger
    "InvestorLedger",
    # Entities
    "OwnedEntity",
    "Enterprise",
    "Asset",
    # Investment history
    "InvestmentRecord",
    # Workbook
    "WorkbookCFG",
]
