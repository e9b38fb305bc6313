"""Export enterprises held by an OwnershipService to an .xlsx workbook."""

from typing import Iterable, Optional

from ownership_domain import NotFoundError, OwnershipService
from ownership_domain.schemas import WorkbookCFG

from .ledger_workbook_renderer import LedgerWorkbookRenderer


def export_workbook(
    service: OwnershipService,
    output_path: str,
    enterprise_ids: Optional[Iterable[str]] = None,
) -> str:
    """Render the current ledgers of a service to output_path.

    Args:
        service: Service whose store to read
        output_path: Destination .xlsx path
        enterprise_ids: Enterprises to export, in order. None exports every
                        enterprise in the store.

    Returns:
        output_path

    Raises:
        NotFoundError: If an id in enterprise_ids does not resolve
    """
    if enterprise_ids is None:
        enterprises = service.list_enterprises()
    else:
        enterprises = []
        for enterprise_id in enterprise_ids:
            enterprise = service.get_enterprise(enterprise_id)
            if enterprise is None:
                raise NotFoundError("Enterprise", enterprise_id)
            enterprises.append(enterprise)

    config = WorkbookCFG(
        title=service.settings.workbook_title,
        currency=service.settings.base_currency,
        enterprises=enterprises,
    )
    return LedgerWorkbookRenderer(config).render(output_path)
