"""Base classes and type system for ownership domain models.

This module provides the shared pydantic base class and the annotated
type aliases used by enterprises, assets, ledgers and investment records.
"""

from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, Field, ConfigDict

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Validation on assignment, so counters cannot be set out of range
    - Support for Decimal and datetime types
    """

    model_config = ConfigDict(
        frozen=False,  # shares_sold and ledgers mutate after creation
        validate_assignment=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

ShareCount = Annotated[
    int,
    Field(ge=0, description="Number of whole shares (non-negative)")
]

IssuedShares = Annotated[
    int,
    Field(gt=0, description="Total issuable shares (strictly positive)")
]

MoneyAmount = Annotated[
    Decimal,
    Field(ge=0, description="Currency amount (non-negative)")
]

UnitPrice = Annotated[
    Decimal,
    Field(gt=0, description="Price or value of a single share (strictly positive)")
]


# =============================================================================
# ID Conventions
# =============================================================================

EnterpriseId = Annotated[
    str,
    Field(min_length=1, description="Opaque enterprise identifier (UUID by default)")
]

AssetId = Annotated[
    str,
    Field(min_length=1, description="Opaque asset identifier, unique within its enterprise")
]

InvestorId = Annotated[
    str,
    Field(min_length=1, description="Caller-supplied investor identity")
]

RecordId = Annotated[
    str,
    Field(min_length=1, description="Investment record identifier")
]

# Ids are never parsed. The default generator yields UUID4 text such as
# "550e8400-e29b-41d4-a716-446655440000"; tests inject readable ids like
# "ent-1" or "asset-2".
