"""Ownership computation blocks.

Convert an Enterprise record into DataFrames for Excel rendering or analysis.

Output DataFrames:
- investor_holdings: Per-investor enterprise shares and percentages
- asset_summary: One row per asset with issued/sold/available shares
- enterprise_summary: Single row of enterprise-level metrics
- asset_holdings: Per-asset, per-investor shares (long format)
"""

from typing import List
import pandas as pd

from .base import Block, BlockContext
from ..schemas import Enterprise, OwnedEntity

INVESTOR_HOLDINGS_COLUMNS = ["investor_id", "shares", "ownership_pct", "pct_of_issued"]

ASSET_SUMMARY_COLUMNS = [
    "asset_id",
    "asset_name",
    "total_shares",
    "shares_sold",
    "available_shares",
    "declared_value",
    "value_per_share",
    "investors_count",
    "pct_sold",
]

ENTERPRISE_SUMMARY_COLUMNS = [
    "enterprise_id",
    "enterprise_name",
    "total_shares",
    "shares_sold",
    "available_shares",
    "price_per_share",
    "amount_raised",
    "investors_count",
    "assets_count",
]

ASSET_HOLDINGS_COLUMNS = ["asset_id", "asset_name", "investor_id", "shares", "ownership_pct"]


def _pct(part: int, whole: int) -> float:
    return float(part) / float(whole) * 100 if whole > 0 else 0.0


def _holding_rows(entity: OwnedEntity) -> List[dict]:
    rows = []
    for investor_id, shares in entity.investors.holdings.items():
        rows.append({
            "investor_id": investor_id,
            "shares": shares,
            "ownership_pct": _pct(shares, entity.shares_sold),
            "pct_of_issued": _pct(shares, entity.total_shares),
        })
    return rows


class OwnershipBlock(Block):
    """Converts an Enterprise into ownership DataFrames.

    Inputs (from context):
        - enterprise: Enterprise to convert

    Outputs (to context):
        - investor_holdings: columns investor_id, shares, ownership_pct
          (% of sold shares), pct_of_issued (% of total_shares); largest
          holders first
        - asset_summary: columns asset_id, asset_name, total_shares,
          shares_sold, available_shares, declared_value, value_per_share,
          investors_count, pct_sold
        - enterprise_summary: single row with enterprise_id, enterprise_name,
          total_shares, shares_sold, available_shares, price_per_share,
          amount_raised (shares_sold * price_per_share), investors_count,
          assets_count

    Example:
        context = BlockContext()
        context.set("enterprise", enterprise)
        OwnershipBlock().execute(context)
        context.get("investor_holdings")
    """

    def __init__(self, enterprise_key: str = "enterprise"):
        self.enterprise_key = enterprise_key

    def inputs(self) -> List[str]:
        return [self.enterprise_key]

    def outputs(self) -> List[str]:
        return ["investor_holdings", "asset_summary", "enterprise_summary"]

    def execute(self, context: BlockContext) -> None:
        enterprise: Enterprise = context.get(self.enterprise_key)

        context.set("investor_holdings", self._compute_holdings(enterprise))
        context.set("asset_summary", self._compute_asset_summary(enterprise))
        context.set("enterprise_summary", self._compute_summary(enterprise))

    def _compute_holdings(self, enterprise: Enterprise) -> pd.DataFrame:
        df = pd.DataFrame(_holding_rows(enterprise), columns=INVESTOR_HOLDINGS_COLUMNS)
        if not df.empty:
            df = df.sort_values(["shares", "investor_id"], ascending=[False, True]).reset_index(drop=True)
        return df

    def _compute_asset_summary(self, enterprise: Enterprise) -> pd.DataFrame:
        rows = []
        for asset in enterprise.assets.values():
            rows.append({
                "asset_id": asset.id,
                "asset_name": asset.name,
                "total_shares": asset.total_shares,
                "shares_sold": asset.shares_sold,
                "available_shares": asset.available_shares,
                "declared_value": float(asset.declared_value),
                "value_per_share": float(asset.value_per_share),
                "investors_count": len(asset.investors.holdings),
                "pct_sold": _pct(asset.shares_sold, asset.total_shares),
            })
        return pd.DataFrame(rows, columns=ASSET_SUMMARY_COLUMNS)

    def _compute_summary(self, enterprise: Enterprise) -> pd.DataFrame:
        return pd.DataFrame([{
            "enterprise_id": enterprise.id,
            "enterprise_name": enterprise.name,
            "total_shares": enterprise.total_shares,
            "shares_sold": enterprise.shares_sold,
            "available_shares": enterprise.available_shares,
            "price_per_share": float(enterprise.price_per_share),
            "amount_raised": float(enterprise.price_per_share * enterprise.shares_sold),
            "investors_count": len(enterprise.investors.holdings),
            "assets_count": len(enterprise.assets),
        }], columns=ENTERPRISE_SUMMARY_COLUMNS)


class AssetHoldingsBlock(Block):
    """Per-asset investor holdings in long format.

    Inputs (from context):
        - enterprise: Enterprise whose assets to expand
        - asset_summary: produced by OwnershipBlock; fixes asset order and names

    Outputs (to context):
        - asset_holdings: columns asset_id, asset_name, investor_id, shares,
          ownership_pct (% of the asset's sold shares). Assets in summary
          order, largest holders first within each asset. Assets with no
          investors contribute no rows.
    """

    def __init__(self, enterprise_key: str = "enterprise"):
        self.enterprise_key = enterprise_key

    def inputs(self) -> List[str]:
        return [self.enterprise_key, "asset_summary"]

    def outputs(self) -> List[str]:
        return ["asset_holdings"]

    def execute(self, context: BlockContext) -> None:
        enterprise: Enterprise = context.get(self.enterprise_key)
        summary: pd.DataFrame = context.get("asset_summary")

        rows = []
        for asset_id, asset_name in zip(summary["asset_id"], summary["asset_name"]):
            asset = enterprise.assets[asset_id]
            holdings = sorted(
                _holding_rows(asset),
                key=lambda r: (-r["shares"], r["investor_id"]),
            )
            for row in holdings:
                rows.append({
                    "asset_id": asset_id,
                    "asset_name": asset_name,
                    "investor_id": row["investor_id"],
                    "shares": row["shares"],
                    "ownership_pct": row["ownership_pct"],
                })

        context.set("asset_holdings", pd.DataFrame(rows, columns=ASSET_HOLDINGS_COLUMNS))
