"""Care-service units and yen amounts

Both are immutable non-negative integers. Subtraction that would go negative
raises instead of producing a negative value.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class _NonNegativeQuantity(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: StrictInt = Field(..., ge=0)

    def __init__(self, value: int, **kwargs):
        super().__init__(value=value, **kwargs)

    def __add__(self, other):
        return type(self)(self.value + self._coerce(other).value)

    def __sub__(self, other):
        return type(self)(self.value - self._coerce(other).value)

    def __mul__(self, factor: int):
        if isinstance(factor, bool) or not isinstance(factor, int):
            return NotImplemented
        return type(self)(self.value * factor)

    __rmul__ = __mul__

    def __lt__(self, other) -> bool:
        return self.value < self._coerce(other).value

    def __le__(self, other) -> bool:
        return self.value <= self._coerce(other).value

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"

    def _coerce(self, other):
        if isinstance(other, type(self)):
            return other
        raise TypeError(f"expected {type(self).__name__}, got {type(other).__name__}")

    @classmethod
    def zero(cls):
        return cls(0)

    @classmethod
    def total(cls, values):
        result = cls(0)
        for value in values:
            result = result + value
        return result


class CareServiceUnit(_NonNegativeQuantity):
    """National care-insurance billing unit count"""


class YenAmount(_NonNegativeQuantity):
    """Integer yen amount"""
