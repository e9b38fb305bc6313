"""Fixtures for workbook tests: a populated in-memory ownership service."""

import itertools

import pytest

from ownership_domain import OwnershipService, OwnershipSettings


@pytest.fixture
def service():
    counter = itertools.count(1)
    return OwnershipService(
        id_generator=lambda: f"id-{next(counter)}",
        settings=OwnershipSettings(_env_file=None, base_currency="USD", workbook_title="Test Ledger"),
    )


@pytest.fixture
def populated(service):
    """Cafe with two investors and two assets; Bakery untouched.

    Cafe: 100 shares at 10 → alice 30, bob 10
    Oven: 5000 / 100 shares → bob 6, carol 4
    Van:  1000 / 8 shares  → unsold
    """
    cafe = service.create_enterprise("Cafe", 100, 10)
    oven = service.register_asset(cafe, "Oven", 5000, 100)
    van = service.register_asset(cafe, "Van", 1000, 8)
    bakery = service.create_enterprise("Bakery", 50, 2)

    service.invest_in_enterprise(cafe, "alice", 300)
    service.invest_in_enterprise(cafe, "bob", 100)
    service.invest_in_asset(cafe, oven, "bob", 300)
    service.invest_in_asset(cafe, oven, "carol", 200)

    return {"cafe": cafe, "oven": oven, "van": van, "bakery": bakery}
