"""Ownership ledger workbook renderer.

One sheet per enterprise, plus an optional summary sheet linking to them.
Values come from the ownership blocks; derived figures (available shares,
percentages, amount raised) are written as formulas so the workbook stays
live when someone edits an input.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, Border, Side, Alignment, PatternFill

from ownership_domain.blocks import AssetHoldingsBlock, BlockContext, BlockExecutor, OwnershipBlock
from ownership_domain.schemas import Enterprise, WorkbookCFG

logger = logging.getLogger(__name__)

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
_MAX_SHEET_TITLE = 31

# Header block rows on each enterprise sheet
ROW_ID = 3
ROW_TOTAL = 4
ROW_SOLD = 5
ROW_AVAILABLE = 6
ROW_PRICE = 7
ROW_RAISED = 8
ROW_INVESTOR_HEADER = 10


def sheet_title_for(name: str, taken: List[str]) -> str:
    """Excel-safe, unique sheet title for an enterprise name.

    Forbidden characters become "_", titles are cut to 31 characters and
    collisions get a " (2)", " (3)", ... suffix. Excel compares titles
    case-insensitively, so "cafe" collides with "Cafe".
    """
    base = _INVALID_SHEET_CHARS.sub("_", name).strip().strip("'") or "Enterprise"
    title = base[:_MAX_SHEET_TITLE]
    taken_lower = {t.lower() for t in taken}
    counter = 2
    while title.lower() in taken_lower:
        suffix = f" ({counter})"
        title = base[:_MAX_SHEET_TITLE - len(suffix)] + suffix
        counter += 1
    return title


def sheet_reference(title: str) -> str:
    """Quoted sheet prefix for a cross-sheet formula; inner quotes doubled.

    Example:
        sheet_reference("Joe's Cafe")  → "'Joe''s Cafe'!"
    """
    escaped = title.replace("'", "''")
    return f"'{escaped}'!"


class LedgerWorkbookRenderer:
    """Render ownership ledgers for the enterprises in a WorkbookCFG."""

    def __init__(self, config: WorkbookCFG):
        self.config = config

        # Define styles
        self.blue_font = Font(color="0000FF")  # Inputs
        self.black_font = Font(color="000000")  # Calculated values
        self.green_font = Font(color="006400")  # Cross-sheet links
        self.bold_font = Font(bold=True)

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")

        self.section_header_font = Font(italic=True, bold=True)
        self.section_header_fill = PatternFill(start_color="E7E6E6", end_color="E7E6E6", fill_type="solid")

        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        self.top_border = Border(top=Side(style='medium'))
        self.center_align = Alignment(horizontal='center', vertical='center', wrap_text=True)

        self.shares_format = '#,##0'
        self.pct_format = '0.0%'
        self.money_format = self._money_format(config.currency)

        # enterprise id -> sheet title, for summary links
        self._sheet_titles: Dict[str, str] = {}

    def render(self, output_path: str) -> str:
        wb = self.build_workbook()
        wb.save(output_path)
        logger.info(
            "Wrote ownership workbook with %d enterprise sheet(s) to %s",
            len(self.config.enterprises), output_path,
        )
        return output_path

    def build_workbook(self) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)
        self._sheet_titles.clear()

        # Created first so it is the leading tab; filled once titles are known
        summary = wb.create_sheet(title="Summary") if self.config.include_summary_sheet else None

        taken = ["Summary"] if self.config.include_summary_sheet else []
        for enterprise in self.config.enterprises:
            title = self._render_enterprise_sheet(wb, enterprise, sheet_title_for(enterprise.name, taken))
            taken.append(title)
            self._sheet_titles[enterprise.id] = title

        if summary is not None:
            self._render_summary_sheet(summary)

        return wb

    # ------------------------------------------------------------------ #
    # Enterprise sheet
    # ------------------------------------------------------------------ #

    def _compute_frames(self, enterprise: Enterprise) -> BlockContext:
        context = BlockContext()
        context.set("enterprise", enterprise)
        return BlockExecutor([OwnershipBlock(), AssetHoldingsBlock()]).execute(context)

    def _render_enterprise_sheet(self, wb: Workbook, enterprise: Enterprise, title: str) -> str:
        """Write one enterprise sheet; returns the title the workbook gave it."""
        frames = self._compute_frames(enterprise)
        holdings: pd.DataFrame = frames.get("investor_holdings")
        assets: pd.DataFrame = frames.get("asset_summary")
        asset_holdings: pd.DataFrame = frames.get("asset_holdings")

        sheet = wb.create_sheet(title=title)
        sheet.sheet_view.showGridLines = False

        title_cell = sheet["A1"]
        title_cell.value = f"Ownership - {enterprise.name}"
        title_cell.font = Font(size=14, bold=True)

        # Investor table occupies rows first_row..last_row
        first_row = ROW_INVESTOR_HEADER + 1
        last_row = ROW_INVESTOR_HEADER + len(holdings)

        self._write_label_value(sheet, ROW_ID, "Enterprise ID", enterprise.id)
        total_cell = self._write_label_value(sheet, ROW_TOTAL, "Total shares", enterprise.total_shares)
        total_cell.font = self.blue_font
        total_cell.number_format = self.shares_format

        sold_value = f"=SUM(B{first_row}:B{last_row})" if len(holdings) else 0
        sold_cell = self._write_label_value(sheet, ROW_SOLD, "Shares sold", sold_value)
        sold_cell.number_format = self.shares_format

        available_cell = self._write_label_value(
            sheet, ROW_AVAILABLE, "Available shares", f"=B{ROW_TOTAL}-B{ROW_SOLD}"
        )
        available_cell.number_format = self.shares_format

        price_cell = self._write_label_value(
            sheet, ROW_PRICE, "Price per share", float(enterprise.price_per_share)
        )
        price_cell.font = self.blue_font
        price_cell.number_format = self.money_format

        raised_cell = self._write_label_value(
            sheet, ROW_RAISED, "Amount raised", f"=B{ROW_SOLD}*B{ROW_PRICE}"
        )
        raised_cell.number_format = self.money_format

        # Investor ledger
        self._write_header_row(sheet, ROW_INVESTOR_HEADER, ["Investor", "Shares", "% of Sold", "% of Issued"])
        for offset, row in enumerate(holdings.itertuples(index=False)):
            r = first_row + offset
            sheet.cell(row=r, column=1, value=row.investor_id)
            shares_cell = sheet.cell(row=r, column=2, value=int(row.shares))
            shares_cell.font = self.blue_font
            shares_cell.number_format = self.shares_format
            sold_pct = sheet.cell(row=r, column=3, value=f"=IF($B${ROW_SOLD}=0,0,B{r}/$B${ROW_SOLD})")
            sold_pct.number_format = self.pct_format
            issued_pct = sheet.cell(row=r, column=4, value=f"=B{r}/$B${ROW_TOTAL}")
            issued_pct.number_format = self.pct_format

        next_row = max(last_row, ROW_INVESTOR_HEADER) + 2
        next_row = self._render_asset_table(sheet, assets, next_row)

        if self.config.include_asset_holdings and len(asset_holdings):
            self._render_asset_holdings(sheet, asset_holdings, next_row)

        sheet.column_dimensions['A'].width = 28
        for letter in ("B", "C", "D", "E", "F", "G"):
            sheet.column_dimensions[letter].width = 15
        sheet.freeze_panes = f"A{ROW_INVESTOR_HEADER + 1}"
        return sheet.title

    def _render_asset_table(self, sheet, assets: pd.DataFrame, start_row: int) -> int:
        """Write the asset table; returns the first free row after it."""
        section = sheet.cell(row=start_row, column=1, value="Assets")
        section.font = self.section_header_font
        section.fill = self.section_header_fill

        header_row = start_row + 1
        self._write_header_row(
            sheet,
            header_row,
            ["Asset", "Total Shares", "Shares Sold", "Available", "Value / Share", "Declared Value", "% Sold"],
        )

        r = header_row
        for row in assets.itertuples(index=False):
            r += 1
            sheet.cell(row=r, column=1, value=row.asset_name)
            total = sheet.cell(row=r, column=2, value=int(row.total_shares))
            total.font = self.blue_font
            total.number_format = self.shares_format
            sold = sheet.cell(row=r, column=3, value=int(row.shares_sold))
            sold.number_format = self.shares_format
            available = sheet.cell(row=r, column=4, value=f"=B{r}-C{r}")
            available.number_format = self.shares_format
            vps = sheet.cell(row=r, column=5, value=float(row.value_per_share))
            vps.number_format = self.money_format
            declared = sheet.cell(row=r, column=6, value=float(row.declared_value))
            declared.font = self.blue_font
            declared.number_format = self.money_format
            pct = sheet.cell(row=r, column=7, value=f"=C{r}/B{r}")
            pct.number_format = self.pct_format

        if r == header_row:
            sheet.cell(row=r + 1, column=1, value="No assets registered").font = Font(italic=True)
            r += 1

        return r + 2

    def _render_asset_holdings(self, sheet, asset_holdings: pd.DataFrame, start_row: int) -> None:
        section = sheet.cell(row=start_row, column=1, value="Asset Holdings")
        section.font = self.section_header_font
        section.fill = self.section_header_fill

        header_row = start_row + 1
        self._write_header_row(sheet, header_row, ["Asset", "Investor", "Shares", "% of Asset Sold"])

        for offset, row in enumerate(asset_holdings.itertuples(index=False), start=1):
            r = header_row + offset
            sheet.cell(row=r, column=1, value=row.asset_name)
            sheet.cell(row=r, column=2, value=row.investor_id)
            shares = sheet.cell(row=r, column=3, value=int(row.shares))
            shares.number_format = self.shares_format
            pct = sheet.cell(row=r, column=4, value=row.ownership_pct / 100)
            pct.number_format = self.pct_format

    # ------------------------------------------------------------------ #
    # Summary sheet
    # ------------------------------------------------------------------ #

    def _render_summary_sheet(self, sheet) -> None:
        sheet.sheet_view.showGridLines = False
        title_cell = sheet["A1"]
        title_cell.value = self.config.title
        title_cell.font = Font(size=14, bold=True)

        header_row = 3
        self._write_header_row(
            sheet,
            header_row,
            ["Enterprise", "Total Shares", "Shares Sold", "Available", "Price / Share", "Amount Raised", "Assets"],
        )

        r = header_row
        for enterprise in self.config.enterprises:
            r += 1
            ref = sheet_reference(self._sheet_titles[enterprise.id])
            sheet.cell(row=r, column=1, value=enterprise.name)
            links = [
                (2, f"={ref}B{ROW_TOTAL}", self.shares_format),
                (3, f"={ref}B{ROW_SOLD}", self.shares_format),
                (4, f"={ref}B{ROW_AVAILABLE}", self.shares_format),
                (5, f"={ref}B{ROW_PRICE}", self.money_format),
                (6, f"={ref}B{ROW_RAISED}", self.money_format),
            ]
            for column, formula, number_format in links:
                cell = sheet.cell(row=r, column=column, value=formula)
                cell.font = self.green_font
                cell.number_format = number_format
            sheet.cell(row=r, column=7, value=len(enterprise.assets))

        if r > header_row:
            totals_row = r + 1
            label = sheet.cell(row=totals_row, column=1, value="Total")
            label.font = self.bold_font
            label.border = self.top_border
            for column in (3, 6):
                letter = self._col_letter(column)
                cell = sheet.cell(
                    row=totals_row, column=column, value=f"=SUM({letter}{header_row + 1}:{letter}{r})"
                )
                cell.font = self.bold_font
                cell.border = self.top_border
                cell.number_format = self.money_format if column == 6 else self.shares_format

        sheet.column_dimensions['A'].width = 28
        for column in range(2, 8):
            sheet.column_dimensions[self._col_letter(column)].width = 15

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _write_label_value(self, sheet, row: int, label: str, value):
        label_cell = sheet.cell(row=row, column=1, value=label)
        label_cell.font = self.bold_font
        value_cell = sheet.cell(row=row, column=2, value=value)
        value_cell.border = self.thin_border
        return value_cell

    def _write_header_row(self, sheet, row: int, headers: List[str]) -> None:
        for column, text in enumerate(headers, start=1):
            cell = sheet.cell(row=row, column=column, value=text)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.center_align

    @staticmethod
    def _money_format(currency: str) -> str:
        if currency == "USD":
            return '$#,##0.00'
        return f'#,##0.00 "{currency}"'

    @staticmethod
    def _col_letter(idx: int) -> str:
        """Convert 1-based column index to Excel column letter."""
        letter = ""
        while idx > 0:
            idx, rem = divmod(idx - 1, 26)
            letter = chr(65 + rem) + letter
        return letter


__all__ = ["LedgerWorkbookRenderer", "sheet_reference", "sheet_title_for"]
