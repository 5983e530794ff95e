"""Monthly receipt aggregation

Groups an invoice's lines by tariff service code into receipt items
(unit score x count). A service code must carry one unit score and one name.
"""

from typing import Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.domain.billing.errors import BillingError
from src.domain.billing.units import CareServiceUnit


class ReceiptItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    service_code: str
    name: Optional[str] = None
    unit_score: CareServiceUnit
    count: int = Field(..., ge=0)

    @field_validator("service_code")
    @classmethod
    def validate_service_code(cls, v):
        if not (len(v) == 6 and v.isdigit()):
            raise ValueError("service_code must be 6 digits")
        return v

    @property
    def total_units(self) -> CareServiceUnit:
        return self.unit_score * self.count


class ReceiptMismatch(BillingError):
    code = "receipt_mismatch"


class MonthlyReceiptAggregator:
    def aggregate(self, lines: Iterable) -> List[ReceiptItem]:
        """
        Args:
            lines: objects exposing service_code, units and item_name

        Returns:
            Receipt items in first-seen service code order
        """
        grouped = {}
        for line in lines:
            grouped.setdefault(line.service_code, []).append(line)

        items = []
        for service_code, group in grouped.items():
            unit_scores = {line.units for line in group}
            if len(unit_scores) != 1:
                raise ReceiptMismatch(f"unit score mismatch for service_code={service_code}")

            names = {line.item_name for line in group if line.item_name}
            if len(names) > 1:
                raise ReceiptMismatch(f"service name mismatch for service_code={service_code}")

            items.append(ReceiptItem(
                service_code=service_code,
                name=names.pop() if names else None,
                unit_score=CareServiceUnit(unit_scores.pop()),
                count=len(group),
            ))
        return items
