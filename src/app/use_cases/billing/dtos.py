"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class GenerationMode(str, Enum):
    """How generation treats an existing invoice of the month"""
    REPLACE = "replace"
    SKIP_EXISTING = "skip_existing"


def _require_month_start(v: date) -> date:
    if v.day != 1:
        raise ValueError("billing_month must be the first day of a month")
    return v


class GenerateInvoicesCommandDTO(BaseModel):
    """
    Command DTO for monthly invoice generation

    Used as input to GenerateInvoices use case.
    """

    tenant_id: str = Field(
        ...,
        min_length=1,
        description="Tenant identifier"
    )

    billing_month: date = Field(
        ...,
        description="First day of the billing month"
    )

    mode: GenerationMode = Field(
        default=GenerationMode.REPLACE,
        description="replace: regenerate draft invoices; skip_existing: leave existing invoices untouched"
    )

    actor: str = Field(
        ...,
        min_length=1,
        description="User or job that requested the generation"
    )

    all_or_nothing: bool = Field(
        default=False,
        description="Abort the whole batch on the first client failure"
    )

    @field_validator("billing_month")
    @classmethod
    def validate_billing_month(cls, v):
        return _require_month_start(v)

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_meguro",
                "billing_month": "2024-04-01",
                "mode": "replace",
                "actor": "staff_001",
                "all_or_nothing": False
            }
        }


class InvoiceSummaryDTO(BaseModel):
    """
    Response DTO for an invoice header

    Returned by GenerateInvoices, GetInvoice and ListInvoices.
    """

    invoice_id: int = Field(..., description="Invoice ID")
    tenant_id: str = Field(..., description="Tenant identifier")
    client_id: int = Field(..., description="Client ID")
    billing_month: date = Field(..., description="First day of the billing month")
    status: str = Field(..., description="Invoice status (draft, fixed)")
    copayment_rate: int = Field(..., description="Copayment rate code (1=10%, 2=20%, 3=30%)")
    total_units: int = Field(..., description="Units accrued in the month")
    insured_units: int = Field(..., description="Units within the benefit ceiling")
    self_pay_units: int = Field(..., description="Units beyond the benefit ceiling")
    improvement_units: int = Field(default=0, description="Treatment improvement addition units")
    subtotal_amount: int = Field(..., description="Converted cost of the month: claim + insured copay + excess (yen)")
    insurance_claim_amount: int = Field(..., description="Amount claimed from insurance (yen)")
    insured_copayment_amount: int = Field(..., description="Client share of the insured amount (yen)")
    excess_copayment_amount: int = Field(..., description="Client liability beyond the ceiling (yen)")
    total_amount: int = Field(..., description="Amount billed to the client (yen)")
    line_count: int = Field(..., description="Number of invoice lines")
    generated_at: Optional[datetime] = Field(default=None, description="Last generation timestamp")
    generated_by: Optional[str] = Field(default=None, description="Actor of the last generation")

    @classmethod
    def from_invoice(cls, invoice, line_count: int) -> "InvoiceSummaryDTO":
        return cls(
            invoice_id=invoice.id,
            tenant_id=invoice.tenant_id,
            client_id=invoice.client_id,
            billing_month=invoice.billing_month,
            status=getattr(invoice.status, "value", invoice.status),
            copayment_rate=invoice.copayment_rate,
            total_units=invoice.total_units,
            insured_units=invoice.insured_units,
            self_pay_units=invoice.self_pay_units,
            improvement_units=invoice.improvement_units,
            subtotal_amount=invoice.subtotal_amount,
            insurance_claim_amount=invoice.insurance_claim_amount,
            insured_copayment_amount=invoice.insured_copayment_amount,
            excess_copayment_amount=invoice.excess_copayment_amount,
            total_amount=invoice.total_amount,
            line_count=line_count,
            generated_at=invoice.generated_at,
            generated_by=invoice.generated_by,
        )


class ClientFailureDTO(BaseModel):
    """Per-client validation failure reported by GenerateInvoices"""

    client_id: int = Field(..., description="Client ID")
    code: str = Field(..., description="Failure code (e.g., missing_price_listing)")
    message: str = Field(..., description="Human readable message")
    reason: Optional[str] = Field(default=None, description="Context (code, date, field values)")


class GenerateInvoicesResultDTO(BaseModel):
    """
    Response DTO for monthly invoice generation

    generated counts every invoice written (new and replaced);
    replaced is the subset that overwrote an existing draft.
    """

    tenant_id: str = Field(..., description="Tenant identifier")
    billing_month: date = Field(..., description="First day of the billing month")
    mode: str = Field(..., description="Generation mode")
    invoices: List[InvoiceSummaryDTO] = Field(default_factory=list, description="Generated or replaced invoices")
    generated: int = Field(default=0, description="Invoices written")
    replaced: int = Field(default=0, description="Existing drafts replaced")
    skipped_existing: int = Field(default=0, description="Clients left untouched in skip_existing mode")
    skipped_fixed: int = Field(default=0, description="Fixed invoices left untouched")
    removed: int = Field(default=0, description="Obsolete drafts removed in replace mode")
    failed: int = Field(default=0, description="Clients that failed validation")
    failures: List[ClientFailureDTO] = Field(default_factory=list, description="Failure details")
    execution_time_ms: int = Field(default=0, description="Execution time in milliseconds")

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_meguro",
                "billing_month": "2024-04-01",
                "mode": "replace",
                "invoices": [],
                "generated": 12,
                "replaced": 3,
                "skipped_existing": 0,
                "skipped_fixed": 1,
                "removed": 0,
                "failed": 1,
                "failures": [
                    {
                        "client_id": 7,
                        "code": "missing_benefit_limit",
                        "message": "Client 7 has no care level",
                        "reason": "care_level is not set"
                    }
                ],
                "execution_time_ms": 420
            }
        }


class InvoiceLineDTO(BaseModel):
    """Line item DTO for invoice detail responses"""

    id: int = Field(..., description="Invoice line ID")
    attendance_id: Optional[int] = Field(default=None, description="Source attendance")
    price_item_id: Optional[int] = Field(default=None, description="Source price item")
    billing_code: str = Field(..., description="Billing code")
    service_code: str = Field(..., description="6-digit tariff service code")
    service_date: date = Field(..., description="Service date")
    item_name: str = Field(..., description="Line item name")
    quantity: Decimal = Field(..., description="Quantity")
    units: int = Field(..., description="Care service units")
    unit_price: int = Field(..., description="Unit price (yen)")
    line_total: int = Field(..., description="Line total (yen)")

    @classmethod
    def from_line(cls, line) -> "InvoiceLineDTO":
        return cls(
            id=line.id,
            attendance_id=line.attendance_id,
            price_item_id=line.price_item_id,
            billing_code=line.billing_code,
            service_code=line.service_code,
            service_date=line.service_date,
            item_name=line.item_name,
            quantity=line.quantity,
            units=line.units,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )


class InvoiceDetailDTO(BaseModel):
    """Response DTO for GetInvoice"""

    invoice: InvoiceSummaryDTO = Field(..., description="Invoice header")
    lines: List[InvoiceLineDTO] = Field(default_factory=list, description="Lines ordered by service date")
    line_count: int = Field(..., description="Number of lines")


class InvoiceListMetaDTO(BaseModel):
    month: str = Field(..., description="Billing month (YYYY-MM)")
    total: int = Field(..., description="Number of invoices")
    total_amount: int = Field(..., description="Sum of total_amount (yen)")


class InvoiceListDTO(BaseModel):
    """Response DTO for ListInvoices"""

    invoices: List[InvoiceSummaryDTO] = Field(default_factory=list, description="Invoices of the month")
    meta: InvoiceListMetaDTO = Field(..., description="List metadata")


class ReceiptItemDTO(BaseModel):
    service_code: str = Field(..., description="6-digit tariff service code")
    name: Optional[str] = Field(default=None, description="Service name")
    unit_score: int = Field(..., description="Units per service")
    count: int = Field(..., description="Number of services")
    total_units: int = Field(..., description="unit_score x count")


class ReceiptDTO(BaseModel):
    """Response DTO for BuildReceipt"""

    invoice: InvoiceSummaryDTO = Field(..., description="Invoice header")
    receipt_items: List[ReceiptItemDTO] = Field(default_factory=list, description="Items grouped by service code")
    total_units: int = Field(..., description="Sum of item total units")


class TransmissionCsvDTO(BaseModel):
    """Response DTO for ExportTransmissionCsv"""

    invoice_id: int = Field(..., description="Invoice ID")
    filename: str = Field(..., description="Suggested file name")
    content: str = Field(..., description="CSV text")


class ConfigureTenantBillingCommandDTO(BaseModel):
    """
    Command DTO for saving a tenant's billing area

    Used as input to ConfigureTenantBilling use case.
    """

    tenant_id: str = Field(..., min_length=1, description="Tenant identifier")
    city_name: str = Field(..., min_length=1, description="Municipality (e.g., 目黒区)")
    facility_scale: str = Field(..., description="normal, large_1 or large_2")
    improvement_addition_rate: Optional[Decimal] = Field(
        default=None,
        gt=0,
        le=1,
        description="Treatment improvement addition rate (None = not claimed)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_meguro",
                "city_name": "目黒区",
                "facility_scale": "normal",
                "improvement_addition_rate": "0.245"
            }
        }


class TenantBillingSettingsDTO(BaseModel):
    """Response DTO for ConfigureTenantBilling"""

    tenant_id: str = Field(..., description="Tenant identifier")
    city_name: str = Field(..., description="Municipality")
    facility_scale: str = Field(..., description="Facility scale")
    area_grade: str = Field(..., description="Resolved area grade")
    unit_rate: Decimal = Field(..., description="Yen per unit in effect today")
    improvement_addition_rate: Optional[Decimal] = Field(default=None, description="Improvement addition rate")
