"""SQLAlchemy Client Repository Implementation"""

from typing import Dict, Iterable, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client


class SqlAlchemyClientRepository(ClientRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: str, client_id: int) -> Optional[Client]:
        statement = (
            select(Client)
            .where(Client.tenant_id == tenant_id)
            .where(Client.id == client_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, tenant_id: str, client_ids: Iterable[int]) -> Dict[int, Client]:
        ids = list(client_ids)
        if not ids:
            return {}

        statement = (
            select(Client)
            .where(Client.tenant_id == tenant_id)
            .where(Client.id.in_(ids))
        )
        result = await self.session.execute(statement)
        return {client.id: client for client in result.scalars().all()}
