"""Base day-service units by care level, facility scale and duration"""

from enum import Enum
from src.domain.billing.area_grade import FacilityScale
from src.domain.billing.errors import UnsupportedServiceUnits
from src.domain.billing.units import CareServiceUnit


class DurationCategory(str, Enum):
    H7_TO_H8 = "h7_to_h8"


UNIT_TABLE = {
    FacilityScale.NORMAL: {
        DurationCategory.H7_TO_H8: {
            1: 658,
            2: 777,
            3: 861,
            4: 980,
            5: 1093,
        }
    }
}


class BasicUnitResolver:
    def resolve(
        self,
        care_level: int,
        facility_scale,
        duration_category=DurationCategory.H7_TO_H8,
    ) -> CareServiceUnit:
        level = self._coerce_care_level(care_level)
        duration = self._coerce_duration(duration_category)
        try:
            scale = FacilityScale(facility_scale)
        except ValueError:
            raise UnsupportedServiceUnits(f"unsupported facility_scale: {facility_scale}")

        units = UNIT_TABLE.get(scale, {}).get(duration, {}).get(level)
        if units is None:
            raise UnsupportedServiceUnits(
                f"unsupported combination: facility_scale={scale.value}, "
                f"duration_category={duration.value}, care_level={level}"
            )
        return CareServiceUnit(units)

    @staticmethod
    def _coerce_care_level(value) -> int:
        if isinstance(value, bool):
            raise UnsupportedServiceUnits("care_level must be within 1..5")
        try:
            level = int(value)
        except (TypeError, ValueError):
            raise UnsupportedServiceUnits("care_level must be within 1..5")
        if level < 1 or level > 5:
            raise UnsupportedServiceUnits("care_level must be within 1..5")
        return level

    @staticmethod
    def _coerce_duration(value) -> DurationCategory:
        normalized = str(value.value if isinstance(value, DurationCategory) else value or "").strip()
        if normalized in ("", "7h_to_8h"):
            return DurationCategory.H7_TO_H8
        try:
            return DurationCategory(normalized)
        except ValueError:
            raise UnsupportedServiceUnits(f"unsupported duration_category: {value}")
