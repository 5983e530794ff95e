"""SQLAlchemy Attendance Repository Implementation"""

from datetime import date
from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.attendance_repository import AttendanceRepository
from src.domain.attendance import Attendance, AttendanceStatus


class SqlAlchemyAttendanceRepository(AttendanceRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _present_in_period(self, tenant_id: str, period_start: date, period_end: date):
        return (
            select(Attendance)
            .where(Attendance.tenant_id == tenant_id)
            .where(Attendance.status == AttendanceStatus.PRESENT)
            .where(Attendance.service_date >= period_start)
            .where(Attendance.service_date <= period_end)
        )

    async def get_present_in_period(
        self, tenant_id: str, period_start: date, period_end: date
    ) -> List[Attendance]:
        statement = self._present_in_period(tenant_id, period_start, period_end).order_by(
            Attendance.client_id, Attendance.service_date, Attendance.id
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_present_for_client(
        self, tenant_id: str, client_id: int, period_start: date, period_end: date
    ) -> List[Attendance]:
        statement = (
            self._present_in_period(tenant_id, period_start, period_end)
            .where(Attendance.client_id == client_id)
            .order_by(Attendance.service_date, Attendance.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
