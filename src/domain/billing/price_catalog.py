"""Tenant price catalog lookup"""

from datetime import date
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field


class PriceQuote(BaseModel):
    model_config = ConfigDict(frozen=True)

    price_item_id: Optional[int] = None
    code: str
    name: str
    unit_price: int = Field(..., ge=0)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None


class PriceCatalog:
    """
    Resolves a code and date to the price listing valid on that date

    Built from a tenant's price items; items that are inactive or outside
    their validity window on the requested date are never returned.
    """

    def __init__(self, price_items: Iterable):
        self._items = list(price_items)

    def lookup(self, code: str, as_of: date) -> Optional[PriceQuote]:
        candidates = [
            item for item in self._items
            if item.code == code and self.is_valid_on(item, as_of)
        ]
        if not candidates:
            return None

        # Latest validity start wins when windows are chained
        item = max(candidates, key=lambda i: (i.valid_from or date.min, i.id or 0))
        return PriceQuote(
            price_item_id=item.id,
            code=item.code,
            name=item.name,
            unit_price=item.unit_price,
            valid_from=item.valid_from,
            valid_to=item.valid_to,
        )

    @staticmethod
    def is_valid_on(item, as_of: date) -> bool:
        if not item.active:
            return False
        if item.valid_from is not None and item.valid_from > as_of:
            return False
        if item.valid_to is not None and item.valid_to < as_of:
            return False
        return True
