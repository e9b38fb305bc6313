"""Excel export for ownership ledgers."""

from .ledger_workbook_renderer import LedgerWorkbookRenderer, sheet_reference, sheet_title_for
from .export import export_workbook

__all__ = ["LedgerWorkbookRenderer", "sheet_reference", "sheet_title_for", "export_workbook"]
