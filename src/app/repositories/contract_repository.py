"""Contract Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List
from src.domain.contract import Contract


class ContractRepository(ABC):
    @abstractmethod
    async def get_for_client_in_period(
        self, tenant_id: str, client_id: int, period_start: date, period_end: date
    ) -> List[Contract]:
        """
        Contracts of a client overlapping [period_start, period_end]

        Args:
            tenant_id: Tenant identifier
            client_id: Client ID
            period_start: First day of the period
            period_end: Last day of the period

        Returns:
            List of contracts ordered by start_on
        """
        pass
