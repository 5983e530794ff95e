"""Attendance Domain Entity

Outcome of one reserved service day. Only present days are billable.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date
from src.domain.base import BaseModel, IdType


class AttendanceStatus(str, Enum):
    """Attendance status types"""
    PENDING = "pending"
    PRESENT = "present"
    ABSENT = "absent"
    CANCELLED = "cancelled"


class Attendance(BaseModel, table=True):
    """
    Attendance - Client attendance for a service date

    Domain Rules:
    - One attendance per client per service date (enforced upstream)
    - Only PRESENT attendances produce invoice lines
    """

    __tablename__ = "attendances"
    __table_args__ = (
        Index('ix_attendances_tenant_date', 'tenant_id', 'service_date'),
        Index('ix_attendances_client_id', 'client_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique attendance identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant ID"
    )

    client_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Client ID"
    )

    service_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Service date"
    )

    status: AttendanceStatus = Field(
        default=AttendanceStatus.PENDING,
        description="Attendance status (pending, present, absent, cancelled)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Attendance creation timestamp"
    )
