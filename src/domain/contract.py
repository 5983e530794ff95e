"""Contract Domain Entity

Service contract of a client. Its service flags decide which additions are
billed on each attended day.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, JSON
from src.domain.base import BaseModel, IdType


class Contract(BaseModel, table=True):
    """
    Contract - Client service agreement

    Domain Rules:
    - Active on a date when start_on <= date <= end_on (end_on None = open ended)
    - Periods of one client do not overlap (enforced by the contract CRUD layer)
    - services maps flags (e.g., "bath", "rehabilitation") to booleans
    """

    __tablename__ = "contracts"
    __table_args__ = (
        Index('ix_contracts_tenant_client', 'tenant_id', 'client_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique contract identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    client_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Client ID"
    )

    start_on: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First day of the contract"
    )

    end_on: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last day of the contract (None = open ended)"
    )

    services: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Enabled service flags"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Contract creation timestamp"
    )

    def is_active_on(self, service_date: date) -> bool:
        return self.start_on <= service_date and (self.end_on is None or self.end_on >= service_date)
