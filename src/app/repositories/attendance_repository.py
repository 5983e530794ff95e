"""Attendance Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List
from src.domain.attendance import Attendance


class AttendanceRepository(ABC):
    @abstractmethod
    async def get_present_in_period(
        self, tenant_id: str, period_start: date, period_end: date
    ) -> List[Attendance]:
        """
        Present attendances of all clients in the period

        Returns:
            List ordered by client_id, service_date, id
        """
        pass

    @abstractmethod
    async def get_present_for_client(
        self, tenant_id: str, client_id: int, period_start: date, period_end: date
    ) -> List[Attendance]:
        """
        Present attendances of one client in the period

        Returns:
            List ordered by service_date, id
        """
        pass
