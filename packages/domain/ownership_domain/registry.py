"""Entity registry: creates and looks up enterprises and their assets.

Registration is the only way entities come into existence. Afterwards their
names, issued shares and prices never change; the allocation engine is the
only writer of shares_sold and investor ledgers.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional

from .errors import NotFoundError
from .schemas import Enterprise, Asset
from .storage import OwnershipStore
from .validation import require_name, require_positive_int, require_positive_amount

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]


def uuid_id_generator() -> str:
    """Default id generator: random UUID4 text."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Default clock: current UTC time."""
    return datetime.now(timezone.utc)


class EnterpriseRegistry:
    """Creates and resolves enterprises and their nested assets.

    Example:
        registry = EnterpriseRegistry(OwnershipStore())
        enterprise_id = registry.create_enterprise("Cafe", 100, 10)
        oven_id = registry.register_asset(enterprise_id, "Oven", 5000, 100)
        registry.get_asset(enterprise_id, oven_id).value_per_share  # Decimal("50")
    """

    def __init__(
        self,
        store: OwnershipStore,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.id_generator = id_generator or uuid_id_generator
        self.clock = clock or utc_now

    # ------------------------------------------------------------------ #
    # Enterprises
    # ------------------------------------------------------------------ #

    def create_enterprise(self, name: Any, total_shares: Any, price_per_share: Any) -> str:
        """Register a new enterprise.

        Args:
            name: Non-blank display name
            total_shares: Total issuable shares (> 0)
            price_per_share: Price of one share (> 0)

        Returns:
            The fresh enterprise id

        Raises:
            InvalidArgumentError: If any argument is empty or not positive
        """
        name = require_name(name)
        total_shares = require_positive_int(total_shares, "total_shares")
        price = require_positive_amount(price_per_share, "price_per_share")

        enterprise_id = self.id_generator()
        enterprise = Enterprise(
            id=enterprise_id,
            name=name,
            total_shares=total_shares,
            price_per_share=price,
            created_at=self.clock(),
        )
        self.store.enterprises.insert(enterprise_id, enterprise)

        logger.info(
            "Created enterprise %s (%s): %d shares at %s",
            enterprise_id, name, total_shares, price,
            extra={"enterprise_id": enterprise_id},
        )
        return enterprise_id

    def get_enterprise(self, enterprise_id: str) -> Optional[Enterprise]:
        """Return the enterprise, or None if the id is unknown."""
        return self.store.enterprises.get(enterprise_id)

    def require_enterprise(self, enterprise_id: str) -> Enterprise:
        """Return the enterprise or raise NotFoundError."""
        enterprise = self.get_enterprise(enterprise_id)
        if enterprise is None:
            raise NotFoundError("Enterprise", enterprise_id)
        return enterprise

    def list_enterprises(self) -> List[Enterprise]:
        return list(self.store.enterprises.values())

    # ------------------------------------------------------------------ #
    # Assets
    # ------------------------------------------------------------------ #

    def register_asset(
        self,
        enterprise_id: str,
        name: Any,
        declared_value: Any,
        total_shares: Any,
    ) -> str:
        """Register an asset inside an existing enterprise.

        value_per_share is declared_value / total_shares computed with
        Decimal division (no truncation) and stored once. Decimal keeps
        the asset's full value purchasable: declared_value 5 over 29 shares
        sells all 29 shares for an investment of 5, where a binary float
        quotient would floor to 28.

        Returns:
            The fresh asset id

        Raises:
            NotFoundError: If enterprise_id does not resolve
            InvalidArgumentError: If name is empty or a number is not positive
        """
        with self.store.lock_for(enterprise_id):
            enterprise = self.require_enterprise(enterprise_id)

            name = require_name(name)
            value = require_positive_amount(declared_value, "declared_value")
            total_shares = require_positive_int(total_shares, "total_shares")

            asset_id = self.id_generator()
            asset = Asset(
                id=asset_id,
                enterprise_id=enterprise_id,
                name=name,
                total_shares=total_shares,
                declared_value=value,
                value_per_share=value / Decimal(total_shares),
                created_at=self.clock(),
            )
            enterprise.assets[asset_id] = asset
            self.store.enterprises.insert(enterprise_id, enterprise)

        logger.info(
            "Registered asset %s (%s) in enterprise %s: %d shares, value per share %s",
            asset_id, name, enterprise_id, total_shares, asset.value_per_share,
            extra={"enterprise_id": enterprise_id, "asset_id": asset_id},
        )
        return asset_id

    def get_asset(self, enterprise_id: str, asset_id: str) -> Optional[Asset]:
        """Return the asset, or None if either id misses."""
        enterprise = self.get_enterprise(enterprise_id)
        if enterprise is None:
            return None
        return enterprise.get_asset(asset_id)
