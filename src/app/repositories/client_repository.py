"""Client Repository Interface

Read access to clients and their structured care data.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional
from src.domain.client import Client


class ClientRepository(ABC):
    @abstractmethod
    async def get_by_id(self, tenant_id: str, client_id: int) -> Optional[Client]:
        """Client of the tenant, None if not found"""
        pass

    @abstractmethod
    async def get_by_ids(self, tenant_id: str, client_ids: Iterable[int]) -> Dict[int, Client]:
        """Clients of the tenant keyed by ID; unknown IDs are absent"""
        pass
