"""Invoice Line Domain Entity

One billable event: a base service or an addition on an attended day.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, Date, ForeignKey, Integer, JSON, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, IdType


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - line_total = round(quantity * unit_price) under the line rounding mode
    - At most one line per (tenant_id, attendance_id, billing_code)
    - Immutable once the invoice is fixed
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'attendance_id', 'billing_code', name='uq_invoice_lines_attendance_code'),
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
        Index('ix_invoice_lines_tenant_date', 'tenant_id', 'service_date'),
        CheckConstraint('quantity > 0', name='invoice_lines_quantity_positive'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice line identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    attendance_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="Attendance the line was derived from"
    )

    price_item_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="Price item the unit price was taken from"
    )

    billing_code: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Billing code (day_service_basic or an addition code)"
    )

    service_code: str = Field(
        sa_column=Column(String(6), nullable=False),
        description="6-digit tariff service code"
    )

    service_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Service date"
    )

    item_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item name"
    )

    quantity: Decimal = Field(
        default=Decimal("1"),
        sa_column=Column(Numeric(8, 2), nullable=False),
        description="Quantity (positive, fractional allowed)"
    )

    units: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Care service units of this line"
    )

    unit_price: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Unit price in yen"
    )

    line_total: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Line total in yen"
    )

    sort_order: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Order within a service date (0 = base service)"
    )

    details: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Calculation snapshot for audit"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line item creation timestamp"
    )
