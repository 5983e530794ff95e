"""SQLAlchemy Price Item Repository Implementation"""

from datetime import date
from typing import List
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.price_item_repository import PriceItemRepository
from src.domain.price_item import PriceItem


class SqlAlchemyPriceItemRepository(PriceItemRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_in_period(
        self, tenant_id: str, period_start: date, period_end: date
    ) -> List[PriceItem]:
        statement = (
            select(PriceItem)
            .where(PriceItem.tenant_id == tenant_id)
            .where(PriceItem.active.is_(True))
            .where(or_(PriceItem.valid_from.is_(None), PriceItem.valid_from <= period_end))
            .where(or_(PriceItem.valid_to.is_(None), PriceItem.valid_to >= period_start))
            .order_by(PriceItem.code, PriceItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
