"""Treatment improvement addition (処遇改善加算)

Computed on the insured units after the ceiling split and billed outside the
benefit ceiling.
"""

from decimal import Decimal, InvalidOperation
from src.domain.billing.errors import BillingError
from src.domain.billing.rounding import HalfUp, RoundingStrategy
from src.domain.billing.units import CareServiceUnit


class ImprovementAdditionCalculator:
    def __init__(self, rounding_strategy: RoundingStrategy = None):
        self.rounding_strategy = rounding_strategy or HalfUp()

    def calculate_units(self, insured_units: CareServiceUnit, rate) -> CareServiceUnit:
        rate_decimal = self.coerce_rate(rate)
        raw_units = Decimal(insured_units.value) * rate_decimal
        return CareServiceUnit(self.rounding_strategy.apply(raw_units))

    @staticmethod
    def coerce_rate(value) -> Decimal:
        try:
            rate = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation:
            raise BillingError(f"improvement addition rate is not numeric: {value!r}")
        if not rate.is_finite() or rate < 0 or rate > 1:
            raise BillingError(f"improvement addition rate must be between 0 and 1: {value}")
        return rate
