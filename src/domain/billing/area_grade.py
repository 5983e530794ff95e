"""Area grade resolution

Maps a tenant's municipality and facility scale to the yen value of one care
service unit. Only municipalities listed here can be billed.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from src.domain.billing.errors import UnsupportedArea


class FacilityScale(str, Enum):
    NORMAL = "normal"
    LARGE_1 = "large_1"
    LARGE_2 = "large_2"


class AreaGrade(str, Enum):
    GRADE_1 = "grade_1"


TOKYO_23_WARDS = (
    "千代田区",
    "中央区",
    "港区",
    "新宿区",
    "文京区",
    "台東区",
    "墨田区",
    "江東区",
    "品川区",
    "目黒区",
    "大田区",
    "世田谷区",
    "渋谷区",
    "中野区",
    "杉並区",
    "豊島区",
    "北区",
    "荒川区",
    "板橋区",
    "練馬区",
    "足立区",
    "葛飾区",
    "江戸川区",
)

CITY_TO_GRADE = {city: AreaGrade.GRADE_1 for city in TOKYO_23_WARDS}

# (grade, scale) -> [(effective_from, yen per unit)], oldest first.
# Day-service unit prices depend on the area grade; every scale of a grade
# shares the same rate under the current tariff.
AREA_GRADE_RATES = {
    (AreaGrade.GRADE_1, FacilityScale.NORMAL): [(date(2015, 4, 1), Decimal("10.90"))],
    (AreaGrade.GRADE_1, FacilityScale.LARGE_1): [(date(2015, 4, 1), Decimal("10.90"))],
    (AreaGrade.GRADE_1, FacilityScale.LARGE_2): [(date(2015, 4, 1), Decimal("10.90"))],
}


def coerce_facility_scale(value) -> FacilityScale:
    if isinstance(value, FacilityScale):
        return value
    normalized = str(value or "").strip()
    if not normalized:
        raise UnsupportedArea("facility_scale is required")
    try:
        return FacilityScale(normalized)
    except ValueError:
        raise UnsupportedArea(
            f"unsupported facility_scale: {value}",
            reason=f"facility_scale must be one of {[scale.value for scale in FacilityScale]}",
        )


class AreaGradeResolver:
    """
    Resolves the currency-per-unit rate for a tenant

    supported_cities() is the allow-list checked when a tenant's billing area
    is configured; rate_for() is what generation uses.
    """

    @staticmethod
    def supported_cities() -> frozenset:
        return frozenset(CITY_TO_GRADE)

    def resolve(self, city_name: Optional[str]) -> AreaGrade:
        city = (city_name or "").strip()
        if not city:
            raise UnsupportedArea("city_name is required")

        grade = CITY_TO_GRADE.get(city)
        if grade is None:
            raise UnsupportedArea(
                f"unsupported city_name: {city_name}",
                reason="city is not in the supported area list",
            )
        return grade

    def rate_for(self, city_name: Optional[str], facility_scale, as_of: date) -> Decimal:
        grade = self.resolve(city_name)
        scale = coerce_facility_scale(facility_scale)

        schedule = AREA_GRADE_RATES.get((grade, scale))
        if not schedule:
            raise UnsupportedArea(f"no unit rate for {grade.value}/{scale.value}")

        rate = None
        for effective_from, value in schedule:
            if effective_from <= as_of:
                rate = value
        if rate is None:
            raise UnsupportedArea(
                f"no unit rate in effect for {grade.value}/{scale.value} on {as_of.isoformat()}"
            )
        return rate

    def validate_configuration(self, city_name: Optional[str], facility_scale) -> None:
        grade = self.resolve(city_name)
        scale = coerce_facility_scale(facility_scale)
        if (grade, scale) not in AREA_GRADE_RATES:
            raise UnsupportedArea(f"no unit rate for {grade.value}/{scale.value}")
