"""Price Item Domain Entity

Tenant-scoped price list entry resolved by code and date.
"""

from datetime import date, datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String, UniqueConstraint
from src.domain.base import BaseModel, IdType


class PriceItem(BaseModel, table=True):
    """
    Price Item - Unit price for a billing code

    Domain Rules:
    - code is unique per tenant
    - unit_price is a non-negative integer yen amount
    - Usable on a date only when active and valid_from <= date <= valid_to
      (missing bounds are open)
    """

    __tablename__ = "price_items"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'code', name='uq_price_items_tenant_code'),
        Index('ix_price_items_tenant_active', 'tenant_id', 'active'),
        CheckConstraint('unit_price >= 0', name='price_items_unit_price_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique price item identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    code: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Billing code (e.g., day_service_basic, bathing)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name used on invoice lines"
    )

    unit_price: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Unit price in yen"
    )

    active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="Inactive items are never used for billing"
    )

    valid_from: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="First valid date (None = open)"
    )

    valid_to: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last valid date (None = open)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Price item creation timestamp"
    )
