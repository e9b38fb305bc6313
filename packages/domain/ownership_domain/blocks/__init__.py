"""Computation blocks for ownership reporting.

This package turns domain records into DataFrames suitable for Excel
rendering or other consumption.

Architecture:
    Schemas (records) → Blocks (computation) → DataFrames (output)

Available blocks:
- OwnershipBlock: investor holdings, asset summary, enterprise summary
- AssetHoldingsBlock: per-asset investor holdings

Usage:
    from ownership_domain.blocks import BlockContext, BlockExecutor, OwnershipBlock

    context = BlockContext()
    context.set("enterprise", enterprise)
    BlockExecutor([OwnershipBlock()]).execute(context)
    holdings_df = context.get("investor_holdings")
"""

from .base import Block, BlockExecutor, BlockContext, CircularDependencyError
from .ownership import OwnershipBlock, AssetHoldingsBlock

__all__ = [
    "Block",
    "BlockExecutor",
    "BlockContext",
    "CircularDependencyError",
    "OwnershipBlock",
    "AssetHoldingsBlock",
]
