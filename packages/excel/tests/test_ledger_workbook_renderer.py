"""Tests for LedgerWorkbookRenderer and export_workbook.

This module checks:
1. Sheet layout - one sheet per enterprise plus the summary
2. Values - inputs written from the ownership blocks
3. Formula structure - derived cells reference the right inputs
"""

import pytest
from openpyxl import load_workbook

from ownership_domain import NotFoundError
from ownership_domain.schemas import WorkbookCFG
from ownership_excel import LedgerWorkbookRenderer, export_workbook, sheet_reference, sheet_title_for


@pytest.fixture
def workbook(service, populated, tmp_path):
    path = export_workbook(service, str(tmp_path / "ledger.xlsx"))
    return load_workbook(path)


# =============================================================================
# Layout
# =============================================================================

def test_sheet_order(workbook):
    assert workbook.sheetnames == ["Summary", "Cafe", "Bakery"]


def test_enterprise_header_block(workbook, populated):
    sheet = workbook["Cafe"]

    assert sheet["A1"].value == "Ownership - Cafe"
    assert sheet["B3"].value == populated["cafe"]
    assert sheet["B4"].value == 100
    assert sheet["B5"].value == "=SUM(B11:B12)"
    assert sheet["B6"].value == "=B4-B5"
    assert sheet["B7"].value == 10
    assert sheet["B8"].value == "=B5*B7"
    assert sheet["B7"].number_format == "$#,##0.00"


def test_investor_rows(workbook):
    sheet = workbook["Cafe"]

    assert sheet["A10"].value == "Investor"
    assert [sheet["A11"].value, sheet["B11"].value] == ["alice", 30]
    assert [sheet["A12"].value, sheet["B12"].value] == ["bob", 10]
    assert sheet["C11"].value == "=IF($B$5=0,0,B11/$B$5)"
    assert sheet["D12"].value == "=B12/$B$4"
    assert sheet["A13"].value is None


def test_asset_table(workbook):
    sheet = workbook["Cafe"]

    assert sheet["A14"].value == "Assets"
    assert sheet["A15"].value == "Asset"
    assert [sheet["A16"].value, sheet["B16"].value, sheet["C16"].value] == ["Oven", 100, 10]
    assert sheet["D16"].value == "=B16-C16"
    assert sheet["E16"].value == 50
    assert sheet["F16"].value == 5000
    assert sheet["G16"].value == "=C16/B16"
    assert [sheet["A17"].value, sheet["C17"].value, sheet["E17"].value] == ["Van", 0, 125]


def test_asset_holdings_section(workbook):
    sheet = workbook["Cafe"]

    assert sheet["A19"].value == "Asset Holdings"
    assert [sheet["A21"].value, sheet["B21"].value, sheet["C21"].value] == ["Oven", "bob", 6]
    assert [sheet["A22"].value, sheet["B22"].value, sheet["C22"].value] == ["Oven", "carol", 4]
    assert sheet["D21"].value == pytest.approx(0.6)


def test_enterprise_without_investors_or_assets(workbook):
    sheet = workbook["Bakery"]

    assert sheet["B5"].value == 0
    assert sheet["A11"].value is None
    assert sheet["A12"].value == "Assets"
    assert sheet["A14"].value == "No assets registered"


def test_summary_links(workbook):
    sheet = workbook["Summary"]

    assert sheet["A1"].value == "Test Ledger"
    assert sheet["A4"].value == "Cafe"
    assert sheet["B4"].value == "='Cafe'!B4"
    assert sheet["C4"].value == "='Cafe'!B5"
    assert sheet["F4"].value == "='Cafe'!B8"
    assert sheet["G4"].value == 2
    assert sheet["A5"].value == "Bakery"
    assert sheet["G5"].value == 0
    assert sheet["A6"].value == "Total"
    assert sheet["C6"].value == "=SUM(C4:C5)"
    assert sheet["F6"].value == "=SUM(F4:F5)"


# =============================================================================
# Options
# =============================================================================

def test_options_disable_summary_and_holdings(service, populated, tmp_path):
    config = WorkbookCFG(
        enterprises=[service.get_enterprise(populated["cafe"])],
        currency="EUR",
        include_summary_sheet=False,
        include_asset_holdings=False,
    )
    path = LedgerWorkbookRenderer(config).render(str(tmp_path / "cafe.xlsx"))
    wb = load_workbook(path)

    assert wb.sheetnames == ["Cafe"]
    sheet = wb["Cafe"]
    assert sheet["B7"].number_format == '#,##0.00 "EUR"'
    assert sheet["A19"].value is None


def test_export_selected_enterprises(service, populated, tmp_path):
    path = export_workbook(service, str(tmp_path / "bakery.xlsx"), enterprise_ids=[populated["bakery"]])
    assert load_workbook(path).sheetnames == ["Summary", "Bakery"]


def test_export_unknown_enterprise(service, populated, tmp_path):
    with pytest.raises(NotFoundError):
        export_workbook(service, str(tmp_path / "missing.xlsx"), enterprise_ids=["missing-id"])


# =============================================================================
# Sheet titles
# =============================================================================

@pytest.mark.parametrize(
    "name,taken,expected",
    [
        ("Cafe", [], "Cafe"),
        ("Cafe: Main/Branch", [], "Cafe_ Main_Branch"),
        ("Cafe", ["Cafe"], "Cafe (2)"),
        ("Cafe", ["Cafe", "Cafe (2)"], "Cafe (3)"),
        ("cafe", ["Cafe"], "cafe (2)"),
        ("summary", ["Summary"], "summary (2)"),
        ("Joe's Cafe", [], "Joe's Cafe"),
        ("'Quoted'", [], "Quoted"),
        ("   ", [], "Enterprise"),
        ("A" * 40, [], "A" * 31),
        ("A" * 40, ["A" * 31], "A" * 27 + " (2)"),
    ],
)
def test_sheet_title_for(name, taken, expected):
    assert sheet_title_for(name, taken) == expected


def test_duplicate_enterprise_names_get_distinct_sheets(service, tmp_path):
    first = service.create_enterprise("Cafe", 10, 1)
    second = service.create_enterprise("Cafe", 10, 1)
    path = export_workbook(service, str(tmp_path / "dupes.xlsx"), enterprise_ids=[first, second])

    assert load_workbook(path).sheetnames == ["Summary", "Cafe", "Cafe (2)"]


def test_names_differing_only_in_case_link_to_their_own_sheets(service, tmp_path):
    upper = service.create_enterprise("Cafe", 10, 1)
    lower = service.create_enterprise("cafe", 20, 1)
    wb = load_workbook(export_workbook(service, str(tmp_path / "case.xlsx"), enterprise_ids=[upper, lower]))

    assert wb.sheetnames == ["Summary", "Cafe", "cafe (2)"]
    assert wb["Summary"]["B4"].value == "='Cafe'!B4"
    assert wb["Summary"]["B5"].value == "='cafe (2)'!B4"
    assert wb["cafe (2)"]["B4"].value == 20


def test_enterprise_named_like_the_summary_sheet(service, tmp_path):
    enterprise_id = service.create_enterprise("summary", 10, 1)
    wb = load_workbook(export_workbook(service, str(tmp_path / "summary.xlsx"), enterprise_ids=[enterprise_id]))

    assert wb.sheetnames == ["Summary", "summary (2)"]
    assert wb["Summary"]["A1"].value == "Test Ledger"
    assert wb["Summary"]["B4"].value == "='summary (2)'!B4"


# =============================================================================
# Cross-sheet references
# =============================================================================

@pytest.mark.parametrize(
    "title,expected",
    [
        ("Cafe", "'Cafe'!"),
        ("Joe's Cafe", "'Joe''s Cafe'!"),
        ("Rock 'n' Roll", "'Rock ''n'' Roll'!"),
    ],
)
def test_sheet_reference(title, expected):
    assert sheet_reference(title) == expected


def test_summary_links_escape_apostrophes(service, tmp_path):
    enterprise_id = service.create_enterprise("Joe's Cafe", 10, 1)
    wb = load_workbook(export_workbook(service, str(tmp_path / "quotes.xlsx"), enterprise_ids=[enterprise_id]))

    assert wb.sheetnames == ["Summary", "Joe's Cafe"]
    summary = wb["Summary"]
    assert summary["B4"].value == "='Joe''s Cafe'!B4"
    assert summary["F4"].value == "='Joe''s Cafe'!B8"
