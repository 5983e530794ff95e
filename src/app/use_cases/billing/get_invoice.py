"""Get Invoice Use Case

Retrieves one invoice of a tenant with its lines.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from .dtos import InvoiceDetailDTO, InvoiceLineDTO, InvoiceSummaryDTO


class GetInvoice:
    """
    Get Invoice Use Case

    Read-only. Lines are returned in service_date, sort_order, id order so the
    base service of a day always precedes its additions.
    """

    def __init__(self, invoice_repo: InvoiceRepository, invoice_line_repo: InvoiceLineRepository):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, tenant_id: str, invoice_id: int) -> Result[InvoiceDetailDTO]:
        """
        Args:
            tenant_id: The tenant identifier
            invoice_id: Invoice ID

        Returns:
            Result[InvoiceDetailDTO]: invoice header, ordered lines and line count

        Errors:
            INVOICE_NOT_FOUND: No such invoice in the tenant
        """
        invoice = await self.invoice_repo.get_by_id(tenant_id, invoice_id)
        if not invoice:
            return Return.err(
                Error(
                    code="INVOICE_NOT_FOUND",
                    message=f"Invoice {invoice_id} not found",
                    reason=f"tenant_id={tenant_id}",
                )
            )

        lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
        return Return.ok(
            InvoiceDetailDTO(
                invoice=InvoiceSummaryDTO.from_invoice(invoice, len(lines)),
                lines=[InvoiceLineDTO.from_line(line) for line in lines],
                line_count=len(lines),
            )
        )
