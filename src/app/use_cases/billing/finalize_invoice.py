"""FinalizeInvoice Use Case

Moves a draft invoice to fixed. Fixed invoices are never regenerated.
"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice import InvoiceStatus
from .dtos import InvoiceSummaryDTO


class FinalizeInvoice:
    """
    Use Case: Fix a draft invoice

    Business Rules:
    1. Only draft invoices can be fixed
    2. Row lock (SELECT FOR UPDATE) so a running generation cannot
       replace the invoice while it is being fixed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, tenant_id: str, invoice_id: int) -> Result[InvoiceSummaryDTO]:
        try:
            # Step 1: Lock the invoice
            invoice = await self.invoice_repo.get_by_id(tenant_id, invoice_id, for_update=True)
            if not invoice:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice {invoice_id} not found",
                        reason=f"tenant_id={tenant_id}",
                    )
                )

            # Step 2: Validate status
            if invoice.status != InvoiceStatus.DRAFT:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_DRAFT",
                        message=f"Invoice {invoice_id} is already fixed",
                        reason=f"status={getattr(invoice.status, 'value', invoice.status)}",
                    )
                )

            # Step 3: Fix and commit
            invoice.status = InvoiceStatus.FIXED
            invoice.fixed_at = datetime.utcnow()
            invoice = await self.invoice_repo.update(invoice)
            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            response = InvoiceSummaryDTO.from_invoice(invoice, len(lines))
            await self.uow.commit()

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="FINALIZE_INVOICE_FAILED",
                    message="Failed to finalize invoice",
                    reason=str(e),
                )
            )
