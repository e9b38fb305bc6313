"""Ownership service: the public operation surface.

OwnershipService wires the registry and the allocation engine to one
injected store, id generator and clock, and keeps the investment history.

Usage:
    service = OwnershipService()
    cafe = service.create_enterprise("Cafe", 100, 10)
    oven = service.register_asset(cafe, "Oven", 5000, 100)

    service.invest_in_enterprise(cafe, "acme_fund", 105)     # 10 shares
    service.invest_in_asset(cafe, oven, "acme_fund", 125)    # 2 shares

    service.get_investor_enterprise_holding(cafe, "acme_fund")    # 10
    service.get_investor_asset_holding(cafe, oven, "acme_fund")   # 2
"""

import logging
from typing import Any, Callable, List, Optional

from .allocation import Allocation, ShareAllocationEngine
from .blocks import BlockContext, BlockExecutor, OwnershipBlock, AssetHoldingsBlock
from .config import OwnershipSettings, get_settings
from .errors import NotFoundError
from .registry import Clock, EnterpriseRegistry, IdGenerator, uuid_id_generator, utc_now
from .schemas import Asset, Enterprise, InvestmentRecord
from .storage import OwnershipStore

logger = logging.getLogger(__name__)


class OwnershipService:
    """Registers enterprises and assets, sells their shares, answers holdings.

    Collaborators are injected; every argument is optional:
        store: OwnershipStore (default: in-memory tables)
        id_generator: zero-argument callable returning fresh ids (default: UUID4)
        clock: zero-argument callable returning an aware datetime (default: UTC now)
        settings: OwnershipSettings (default: get_settings())
    """

    def __init__(
        self,
        store: Optional[OwnershipStore] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        settings: Optional[OwnershipSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store or OwnershipStore()
        self.id_generator = id_generator or uuid_id_generator
        self.clock = clock or utc_now
        self.registry = EnterpriseRegistry(self.store, self.id_generator, self.clock)
        self.engine = ShareAllocationEngine(self.store)

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def create_enterprise(self, name: Any, total_shares: Any, price_per_share: Any) -> str:
        return self.registry.create_enterprise(name, total_shares, price_per_share)

    def register_asset(self, enterprise_id: str, name: Any, value: Any, total_shares: Any) -> str:
        return self.registry.register_asset(enterprise_id, name, value, total_shares)

    # ------------------------------------------------------------------ #
    # Investment
    # ------------------------------------------------------------------ #

    def invest_in_enterprise(self, enterprise_id: str, investor_id: Any, amount: Any) -> int:
        """Buy enterprise shares; returns the number of shares purchased.

        Raises:
            NotFoundError: Unknown enterprise
            InvalidArgumentError: amount <= 0 or blank investor id
            CapacityExceededError: Purchase would oversell the enterprise
        """
        return self._invest(
            enterprise_id,
            lambda: self.engine.invest_in_enterprise(enterprise_id, investor_id, amount),
        )

    def invest_in_asset(
        self,
        enterprise_id: str,
        asset_id: str,
        investor_id: Any,
        amount: Any,
    ) -> int:
        """Buy asset shares; returns the number of shares purchased.

        Raises:
            NotFoundError: Unknown enterprise or asset
            InvalidArgumentError: amount <= 0 or blank investor id
            CapacityExceededError: Purchase would oversell the asset
        """
        return self._invest(
            enterprise_id,
            lambda: self.engine.invest_in_asset(enterprise_id, asset_id, investor_id, amount),
        )

    def _invest(self, enterprise_id: str, purchase: Callable[[], Allocation]) -> int:
        """Run purchase and write its history record under the enterprise lock.

        If the record cannot be written, the enterprise is restored to its
        state before the purchase and the storage error propagates.
        """
        with self.store.lock_for(enterprise_id):
            before = self.store.enterprises.get(enterprise_id)
            allocation = purchase()
            try:
                self._record(allocation)
            except Exception:
                logger.error(
                    "Failed to record investment by %s; restoring enterprise %s",
                    allocation.investor_id, enterprise_id,
                    extra={"enterprise_id": enterprise_id, "investor_id": allocation.investor_id},
                )
                self.store.enterprises.insert(enterprise_id, before)
                raise
        return allocation.shares

    def _record(self, allocation: Allocation) -> InvestmentRecord:
        record = InvestmentRecord(
            record_id=self.id_generator(),
            enterprise_id=allocation.enterprise_id,
            asset_id=allocation.asset_id,
            investor_id=allocation.investor_id,
            amount=allocation.amount,
            unit_price=allocation.unit_price,
            shares_purchased=allocation.shares,
            forfeited_amount=allocation.forfeited,
            currency=self.settings.base_currency,
            recorded_at=self.clock(),
        )
        self.store.investments.insert(record.record_id, record)
        return record

    # ------------------------------------------------------------------ #
    # Lookups (absence is a normal result)
    # ------------------------------------------------------------------ #

    def get_enterprise(self, enterprise_id: str) -> Optional[Enterprise]:
        return self.registry.get_enterprise(enterprise_id)

    def get_asset(self, enterprise_id: str, asset_id: str) -> Optional[Asset]:
        return self.registry.get_asset(enterprise_id, asset_id)

    def list_enterprises(self) -> List[Enterprise]:
        return self.registry.list_enterprises()

    def get_investor_enterprise_holding(self, enterprise_id: str, investor_id: str) -> int:
        enterprise = self.get_enterprise(enterprise_id)
        if enterprise is None:
            return 0
        return enterprise.investors.holding(investor_id)

    def get_investor_asset_holding(self, enterprise_id: str, asset_id: str, investor_id: str) -> int:
        asset = self.get_asset(enterprise_id, asset_id)
        if asset is None:
            return 0
        return asset.investors.holding(investor_id)

    def list_investments(
        self,
        enterprise_id: str,
        asset_id: Optional[str] = None,
    ) -> List[InvestmentRecord]:
        """Accepted investments for an enterprise, oldest first.

        Args:
            enterprise_id: Enterprise whose history to return
            asset_id: If set, only investments in this asset. If None, every
                      investment in the enterprise and its assets.
        """
        records = [
            record for record in self.store.investments.values()
            if record.enterprise_id == enterprise_id
            and (asset_id is None or record.asset_id == asset_id)
        ]
        return sorted(records, key=lambda r: r.recorded_at)

    # ------------------------------------------------------------------ #
    # Reporting
    # ------------------------------------------------------------------ #

    def ownership_report(self, enterprise_id: str) -> BlockContext:
        """Compute ownership DataFrames for one enterprise.

        Returns:
            BlockContext holding "investor_holdings", "asset_summary",
            "enterprise_summary" and "asset_holdings" DataFrames

        Raises:
            NotFoundError: Unknown enterprise
        """
        enterprise = self.get_enterprise(enterprise_id)
        if enterprise is None:
            raise NotFoundError("Enterprise", enterprise_id)

        context = BlockContext()
        context.set("enterprise", enterprise)
        executor = BlockExecutor([AssetHoldingsBlock(), OwnershipBlock()])
        return executor.execute(context)
