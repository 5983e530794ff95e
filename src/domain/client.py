"""Client Domain Entity

Day-service user. Carries the structured care data that drives the monthly
benefit ceiling and copayment rate.
"""

from datetime import date, datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, String, Date
from src.domain.base import BaseModel, IdType


class Client(BaseModel, table=True):
    """
    Client - Care service user

    Domain Rules:
    - care_level is 1..5 (要介護1..5); None means not certified
    - copayment_rate is 1, 2 or 3 (10%, 20%, 30%)
    - benefit_limit_units overrides the statutory ceiling when set
    - Billing fails for a client whose care data is missing
    """

    __tablename__ = "clients"
    __table_args__ = (
        Index('ix_clients_tenant_id', 'tenant_id'),
        CheckConstraint('care_level IS NULL OR care_level BETWEEN 1 AND 5', name='clients_care_level_range'),
        CheckConstraint('copayment_rate IS NULL OR copayment_rate IN (1, 2, 3)', name='clients_copayment_rate_range'),
        CheckConstraint(
            'benefit_limit_units IS NULL OR benefit_limit_units >= 0',
            name='clients_benefit_limit_units_non_negative',
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique client identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client name"
    )

    care_level: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Certified care level (1..5)"
    )

    copayment_rate: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Copayment rate code (1=10%, 2=20%, 3=30%)"
    )

    benefit_limit_units: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Monthly unit ceiling override"
    )

    certification_valid_from: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Care certification start date"
    )

    certification_valid_to: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Care certification end date"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Client creation timestamp"
    )
