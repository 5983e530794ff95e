"""Build Receipt Use Case

Aggregates an invoice's lines into the monthly receipt (one item per tariff
service code).
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.billing import BillingError, MonthlyReceiptAggregator
from .dtos import InvoiceSummaryDTO, ReceiptDTO, ReceiptItemDTO


class BuildReceipt:
    """
    Use Case: Build the monthly receipt of an invoice

    Business Rules:
    1. Items are grouped by service_code in first-seen line order
    2. One service code must carry a single unit score and name
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        aggregator: MonthlyReceiptAggregator = None,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.aggregator = aggregator or MonthlyReceiptAggregator()

    async def execute(self, tenant_id: str, invoice_id: int) -> Result[ReceiptDTO]:
        """
        Errors:
            INVOICE_NOT_FOUND: No such invoice in the tenant
            RECEIPT_MISMATCH: Lines of one service code disagree on units or name
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
        try:
            items = self.aggregator.aggregate(lines)
        except BillingError as e:
            return Return.err(
                Error(
                    code=e.code.upper(),
                    message=e.message,
                    reason=e.reason or f"invoice_id={invoice_id}",
                )
            )

        item_dtos = [
            ReceiptItemDTO(
                service_code=item.service_code,
                name=item.name,
                unit_score=item.unit_score.value,
                count=item.count,
                total_units=item.total_units.value,
            )
            for item in items
        ]
        return Return.ok(
            ReceiptDTO(
                invoice=InvoiceSummaryDTO.from_invoice(invoice, len(lines)),
                receipt_items=item_dtos,
                total_units=sum(item.total_units for item in item_dtos),
            )
        )
