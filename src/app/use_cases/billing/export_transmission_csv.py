"""Export Transmission CSV Use Case

Renders an invoice's receipt as the claim transmission CSV.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.tenant_repository import TenantRepository
from src.domain.billing import BillingError, MonthlyReceiptAggregator, TransmissionCsvGenerator
from .dtos import TransmissionCsvDTO


class ExportTransmissionCsv:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        tenant_repo: TenantRepository,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.tenant_repo = tenant_repo

    async def execute(self, tenant_id: str, invoice_id: int) -> Result[TransmissionCsvDTO]:
        """
        Returns:
            Result[TransmissionCsvDTO]: CSV text with header, detail and summary records

        Errors:
            INVOICE_NOT_FOUND: No such invoice in the tenant
            RECEIPT_MISMATCH: Lines cannot be aggregated into a receipt
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

        tenant = await self.tenant_repo.get_by_id(tenant_id)
        lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
        try:
            items = MonthlyReceiptAggregator().aggregate(lines)
        except BillingError as e:
            return Return.err(Error(code=e.code.upper(), message=e.message, reason=e.reason))

        generator = TransmissionCsvGenerator(
            invoice, items, tenant_slug=tenant.slug if tenant else ""
        )
        return Return.ok(
            TransmissionCsvDTO(
                invoice_id=invoice.id,
                filename=(
                    f"transmission_{generator.business_office_number()}_"
                    f"{invoice.billing_month.strftime('%Y%m')}_{invoice.client_id}.csv"
                ),
                content=generator.generate(),
            )
        )
