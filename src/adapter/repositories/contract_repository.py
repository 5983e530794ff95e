"""SQLAlchemy Contract Repository Implementation"""

from datetime import date
from typing import List
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.contract_repository import ContractRepository
from src.domain.contract import Contract


class SqlAlchemyContractRepository(ContractRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_client_in_period(
        self, tenant_id: str, client_id: int, period_start: date, period_end: date
    ) -> List[Contract]:
        statement = (
            select(Contract)
            .where(Contract.tenant_id == tenant_id)
            .where(Contract.client_id == client_id)
            .where(Contract.start_on <= period_end)
            .where(or_(Contract.end_on.is_(None), Contract.end_on >= period_start))
            .order_by(Contract.start_on, Contract.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
