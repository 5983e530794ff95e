"""Tenant Repository Interface

Defines the contract for tenant persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.tenant import Tenant


class TenantRepository(ABC):
    """Repository interface for Tenant persistence"""

    @abstractmethod
    async def get_by_id(self, tenant_id: str, for_update: bool = False) -> Optional[Tenant]:
        """
        Retrieve tenant by ID

        Args:
            tenant_id: Tenant identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Tenant if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """
        Update an existing tenant

        Args:
            tenant: Tenant entity with updated values

        Returns:
            Updated Tenant
        """
        pass
