"""Rounding strategies for regulated yen and unit amounts

Amounts are handled as ``Decimal`` end to end. Floats are converted through
their string form so 4107.5 stays 4107.5 rather than its binary expansion.
"""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP
from enum import Enum
from typing import Union
from pydantic import BaseModel, ConfigDict, Field
from src.domain.billing.errors import InvalidRoundingInput

Amount = Union[Decimal, int, float, str]


def to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidRoundingInput(f"amount must be numeric, got {amount!r}")
    if isinstance(amount, Decimal):
        decimal = amount
    elif isinstance(amount, (int, float, str)):
        try:
            decimal = Decimal(str(amount))
        except InvalidOperation:
            raise InvalidRoundingInput(f"amount must be numeric, got {amount!r}")
    else:
        raise InvalidRoundingInput(
            f"amount must be Decimal, int, float or str, got {type(amount).__name__}"
        )
    if not decimal.is_finite():
        raise InvalidRoundingInput(f"amount must be finite, got {amount!r}")
    return decimal


class RoundingStrategy(ABC):
    """Converts a non-negative amount to an integer"""

    name: str = ""
    rounding: str = ""

    def apply(self, amount: Amount) -> int:
        decimal = to_decimal(amount)
        if decimal < 0:
            raise InvalidRoundingInput(
                f"{self.name} rounding only supports non-negative amounts, got {amount}",
                reason=f"amount={amount}",
            )
        return int(decimal.quantize(Decimal("1"), rounding=self.rounding))

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class HalfUp(RoundingStrategy):
    """Nearest integer, ties away from zero (4107.50 -> 4108)"""

    name = "half_up"
    rounding = ROUND_HALF_UP


class Truncate(RoundingStrategy):
    """Drops the fractional part (16698.80 -> 16698)"""

    name = "truncate"
    rounding = ROUND_FLOOR


class RoundingMode(str, Enum):
    HALF_UP = "half_up"
    TRUNCATE = "truncate"

    def strategy(self) -> RoundingStrategy:
        if self is RoundingMode.HALF_UP:
            return HalfUp()
        return Truncate()


class RoundingPolicy(BaseModel):
    """
    Which rounding mode applies at each billing step

    Passed explicitly into the calculation so tenants and regions can use
    different conventions within the same process.
    """

    model_config = ConfigDict(frozen=True)

    line_total: RoundingMode = Field(
        default=RoundingMode.HALF_UP,
        description="quantity x unit_price for each invoice line"
    )
    unit_conversion: RoundingMode = Field(
        default=RoundingMode.TRUNCATE,
        description="insured units x area rate"
    )
    excess_conversion: RoundingMode = Field(
        default=RoundingMode.TRUNCATE,
        description="self-pay units x area rate"
    )
    insured_copayment: RoundingMode = Field(
        default=RoundingMode.HALF_UP,
        description="insured yen x copayment rate"
    )
    improvement_units: RoundingMode = Field(
        default=RoundingMode.HALF_UP,
        description="insured units x improvement addition rate"
    )

    @classmethod
    def from_config(cls, config) -> "RoundingPolicy":
        return cls(
            line_total=getattr(config, "ROUNDING_LINE_TOTAL", RoundingMode.HALF_UP.value),
            unit_conversion=getattr(config, "ROUNDING_UNIT_CONVERSION", RoundingMode.TRUNCATE.value),
            excess_conversion=getattr(config, "ROUNDING_EXCESS_CONVERSION", RoundingMode.TRUNCATE.value),
            insured_copayment=getattr(config, "ROUNDING_INSURED_COPAYMENT", RoundingMode.HALF_UP.value),
            improvement_units=getattr(config, "ROUNDING_IMPROVEMENT_UNITS", RoundingMode.HALF_UP.value),
        )
