"""Price Item Repository Interface

Backs the tenant price catalog used during invoice generation.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List
from src.domain.price_item import PriceItem


class PriceItemRepository(ABC):
    @abstractmethod
    async def get_active_in_period(
        self, tenant_id: str, period_start: date, period_end: date
    ) -> List[PriceItem]:
        """
        Active price items whose validity window overlaps the period

        Args:
            tenant_id: Tenant identifier
            period_start: First day of the period
            period_end: Last day of the period

        Returns:
            List of PriceItem
        """
        pass
