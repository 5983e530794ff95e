"""
List Invoices Use Case

Lists a tenant's invoices of one billing month with line counts.
"""
from datetime import date
from libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from .dtos import InvoiceListDTO, InvoiceListMetaDTO, InvoiceSummaryDTO


class ListInvoices:
    """
    Use case: Monthly invoice list

    Invoices are ordered by client_id. meta.total_amount is the sum billed to
    clients for the month.
    """

    def __init__(self, invoice_repo: InvoiceRepository, invoice_line_repo: InvoiceLineRepository):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, tenant_id: str, billing_month: date) -> Result[InvoiceListDTO]:
        billing_month = billing_month.replace(day=1)
        invoices = await self.invoice_repo.get_for_month(tenant_id, billing_month)
        line_counts = await self.invoice_line_repo.count_by_invoice_ids(
            [invoice.id for invoice in invoices]
        )

        summaries = [
            InvoiceSummaryDTO.from_invoice(invoice, line_counts.get(invoice.id, 0))
            for invoice in invoices
        ]
        return Return.ok(
            InvoiceListDTO(
                invoices=summaries,
                meta=InvoiceListMetaDTO(
                    month=billing_month.strftime("%Y-%m"),
                    total=len(summaries),
                    total_amount=sum(summary.total_amount for summary in summaries),
                ),
            )
        )
