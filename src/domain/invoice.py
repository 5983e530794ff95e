"""Invoice Domain Entity

Monthly care-insurance invoice of one client, with the apportionment between
insurance and the client.
"""

from datetime import datetime, date
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, Date, Integer, String, UniqueConstraint
from src.domain.base import BaseModel, IdType


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    FIXED = "fixed"


class Invoice(BaseModel, table=True):
    """
    Invoice - Monthly billing for one client

    Domain Rules:
    - At most one invoice per (tenant_id, client_id, billing_month)
    - billing_month is the first day of a month
    - subtotal_amount = insurance_claim_amount + insured_copayment_amount
      + excess_copayment_amount (converted cost of the month)
    - insurance_claim_amount + insured_copayment_amount is the insured yen
    - total_amount = insured_copayment_amount + excess_copayment_amount
    - Status transitions: draft -> fixed; fixed invoices are never regenerated
    - Created or replaced only by invoice generation, never patched
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'client_id', 'billing_month', name='uq_invoices_tenant_client_month'),
        Index('ix_invoices_tenant_month', 'tenant_id', 'billing_month'),
        Index('ix_invoices_tenant_status', 'tenant_id', 'status'),
        CheckConstraint('subtotal_amount >= 0', name='invoices_subtotal_non_negative'),
        CheckConstraint('total_amount >= 0', name='invoices_total_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    client_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Client ID"
    )

    billing_month: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First day of the billing month"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, fixed)"
    )

    copayment_rate: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Copayment rate code applied (1=10%, 2=20%, 3=30%)"
    )

    total_units: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Units accrued in the month (base + additions)"
    )

    insured_units: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Units within the benefit ceiling"
    )

    self_pay_units: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Units beyond the benefit ceiling"
    )

    improvement_units: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Treatment improvement addition units"
    )

    subtotal_amount: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Sum of line totals (yen)"
    )

    insurance_claim_amount: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Amount claimed from insurance (yen)"
    )

    insured_copayment_amount: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Client share of the insured amount (yen)"
    )

    excess_copayment_amount: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Client liability for units beyond the ceiling (yen)"
    )

    total_amount: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Amount billed to the client (yen)"
    )

    generated_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last generation"
    )

    generated_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Actor that ran the last generation"
    )

    fixed_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the invoice was fixed"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "tenant_id": "tenant_meguro",
                "client_id": 42,
                "billing_month": "2024-04-01",
                "status": "draft",
                "copayment_rate": 1,
                "total_units": 17028,
                "insured_units": 16765,
                "self_pay_units": 263,
                "improvement_units": 0,
                "subtotal_amount": 185604,
                "insurance_claim_amount": 164464,
                "insured_copayment_amount": 18274,
                "excess_copayment_amount": 2866,
                "total_amount": 21140,
                "generated_at": "2024-05-01T00:00:00Z",
                "generated_by": "staff_001",
            }
        }
