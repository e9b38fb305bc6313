"""Tests for OwnershipService: investment history and reporting."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from ownership_domain import (
    CapacityExceededError,
    InMemoryTable,
    NotFoundError,
    OwnershipService,
    OwnershipSettings,
    OwnershipStore,
)


class UnwritableTable(InMemoryTable):
    """Investments table whose writes always fail."""

    def insert(self, key, value):
        raise OSError("investments table unavailable")


# =============================================================================
# Investment history
# =============================================================================

class TestInvestmentHistory:
    """Each accepted investment leaves exactly one record."""

    def test_enterprise_investment_record(self, service, cafe):
        service.invest_in_enterprise(cafe, "inv1", 105)

        [record] = service.list_investments(cafe)
        assert record.enterprise_id == cafe
        assert record.asset_id is None
        assert record.investor_id == "inv1"
        assert record.amount == Decimal("105")
        assert record.unit_price == Decimal("10")
        assert record.shares_purchased == 10
        assert record.forfeited_amount == Decimal("5")
        assert record.invested_amount == Decimal("100")
        assert record.currency == "USD"
        assert not record.is_asset_investment

    def test_asset_investment_record(self, service, cafe):
        oven = service.register_asset(cafe, "Oven", 5000, 100)
        service.invest_in_asset(cafe, oven, "inv1", 125)

        [record] = service.list_investments(cafe, asset_id=oven)
        assert record.is_asset_investment
        assert record.shares_purchased == 2
        assert record.unit_price == Decimal("50")
        assert record.forfeited_amount == Decimal("25")

    def test_filtering_and_order(self, service, cafe):
        oven = service.register_asset(cafe, "Oven", 5000, 100)
        other = service.create_enterprise("Bakery", 10, 1)

        service.invest_in_enterprise(cafe, "inv1", 10)
        service.invest_in_asset(cafe, oven, "inv2", 50)
        service.invest_in_enterprise(other, "inv3", 1)
        service.invest_in_enterprise(cafe, "inv4", 20)

        assert [r.investor_id for r in service.list_investments(cafe)] == ["inv1", "inv2", "inv4"]
        assert [r.investor_id for r in service.list_investments(cafe, asset_id=oven)] == ["inv2"]
        assert [r.investor_id for r in service.list_investments(other)] == ["inv3"]

        recorded = [r.recorded_at for r in service.list_investments(cafe)]
        assert recorded == sorted(recorded)

    def test_rejected_investment_leaves_no_record(self, service, cafe):
        with pytest.raises(CapacityExceededError):
            service.invest_in_enterprise(cafe, "inv1", 5000)
        with pytest.raises(NotFoundError):
            service.invest_in_enterprise("missing-id", "inv1", 10)

        assert service.list_investments(cafe) == []
        assert service.list_investments("missing-id") == []

    def test_failed_history_write_restores_enterprise(self, clock, settings):
        """A purchase whose record cannot be stored is not kept."""
        store = OwnershipStore(investments=UnwritableTable("investments"))
        service = OwnershipService(store=store, clock=clock, settings=settings)
        enterprise_id = service.create_enterprise("Cafe", 100, 10)
        oven = service.register_asset(enterprise_id, "Oven", 5000, 100)

        with pytest.raises(OSError, match="investments table unavailable"):
            service.invest_in_enterprise(enterprise_id, "inv1", 100)
        with pytest.raises(OSError):
            service.invest_in_asset(enterprise_id, oven, "inv1", 500)

        enterprise = service.get_enterprise(enterprise_id)
        assert enterprise.shares_sold == 0
        assert enterprise.investors.holdings == {}
        assert enterprise.assets[oven].shares_sold == 0
        assert service.get_investor_asset_holding(enterprise_id, oven, "inv1") == 0

    def test_currency_comes_from_settings(self, store):
        service = OwnershipService(
            store=store,
            settings=OwnershipSettings(_env_file=None, base_currency="EUR"),
        )
        enterprise_id = service.create_enterprise("Cafe", 100, 10)
        service.invest_in_enterprise(enterprise_id, "inv1", 10)

        assert service.list_investments(enterprise_id)[0].currency == "EUR"


# =============================================================================
# Collaborators
# =============================================================================

def test_default_collaborators(settings):
    """With only settings injected, the service uses UUIDs and UTC time."""
    service = OwnershipService(settings=settings)
    enterprise_id = service.create_enterprise("Cafe", 100, 10)
    enterprise = service.get_enterprise(enterprise_id)

    assert len(enterprise_id) == 36
    assert enterprise.created_at.tzinfo == timezone.utc


def test_injected_clock_timestamps_entities(service, cafe):
    oven = service.register_asset(cafe, "Oven", 5000, 100)
    assert service.get_enterprise(cafe).created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert service.get_asset(cafe, oven).created_at == datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)


def test_services_sharing_a_store_see_the_same_ledgers(store, settings):
    writer = OwnershipService(store=store, settings=settings)
    reader = OwnershipService(store=store, settings=settings)

    enterprise_id = writer.create_enterprise("Cafe", 100, 10)
    writer.invest_in_enterprise(enterprise_id, "inv1", 50)

    assert reader.get_investor_enterprise_holding(enterprise_id, "inv1") == 5


def test_list_enterprises(service, cafe):
    bakery = service.create_enterprise("Bakery", 10, 1)
    assert [e.id for e in service.list_enterprises()] == [cafe, bakery]


# =============================================================================
# Reporting
# =============================================================================

class TestOwnershipReport:
    """ownership_report runs the ownership blocks for one enterprise."""

    def test_report_frames(self, service, cafe):
        oven = service.register_asset(cafe, "Oven", 5000, 100)
        service.invest_in_enterprise(cafe, "alice", 300)
        service.invest_in_enterprise(cafe, "bob", 100)
        service.invest_in_asset(cafe, oven, "bob", 500)

        report = service.ownership_report(cafe)

        holdings = report.get("investor_holdings")
        assert list(holdings["investor_id"]) == ["alice", "bob"]
        assert list(holdings["shares"]) == [30, 10]
        assert list(holdings["ownership_pct"]) == pytest.approx([75.0, 25.0])

        summary = report.get("enterprise_summary").iloc[0]
        assert summary["shares_sold"] == 40
        assert summary["available_shares"] == 60
        assert summary["amount_raised"] == pytest.approx(400.0)
        assert summary["assets_count"] == 1

        asset_holdings = report.get("asset_holdings")
        assert list(asset_holdings["investor_id"]) == ["bob"]
        assert list(asset_holdings["shares"]) == [10]

    def test_unknown_enterprise(self, service):
        with pytest.raises(NotFoundError):
            service.ownership_report("missing-id")
