"""Tenant Domain Entity

Facility operating the day service. Its city and facility scale select the
area unit rate used for billing.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel
from src.domain.billing.area_grade import FacilityScale


class Tenant(BaseModel, table=True):
    """
    Tenant - Day-service facility

    Domain Rules:
    - slug is unique
    - city_name must be in AreaGradeResolver.supported_cities() before
      invoices can be generated (checked when billing settings are saved)
    - improvement_addition_rate is optional (None = no improvement addition)
    """

    __tablename__ = "tenants"

    id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Tenant identifier"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Facility name"
    )

    slug: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True),
        description="Unique slug; its digits form the business office number"
    )

    city_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Municipality of the facility (e.g., 目黒区)"
    )

    facility_scale: Optional[FacilityScale] = Field(
        default=None,
        description="Facility scale tier (normal, large_1, large_2)"
    )

    improvement_addition_rate: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(5, 3), nullable=True),
        description="Treatment improvement addition rate (e.g., 0.245)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Tenant creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
