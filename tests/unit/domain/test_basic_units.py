"""Unit tests for BasicUnitResolver"""

import pytest

from src.domain.billing import BasicUnitResolver, CareServiceUnit, DurationCategory, FacilityScale
from src.domain.billing.errors import UnsupportedServiceUnits


@pytest.fixture
def resolver():
    return BasicUnitResolver()


class TestBasicUnitResolver:
    @pytest.mark.parametrize(
        "care_level,units",
        [(1, 658), (2, 777), (3, 861), (4, 980), (5, 1093)],
    )
    def test_normal_scale_7_to_8_hours(self, resolver, care_level, units):
        assert resolver.resolve(care_level, FacilityScale.NORMAL) == CareServiceUnit(units)

    def test_duration_alias(self, resolver):
        assert resolver.resolve(1, "normal", "7h_to_8h") == CareServiceUnit(658)
        assert resolver.resolve(1, "normal", DurationCategory.H7_TO_H8) == CareServiceUnit(658)

    @pytest.mark.parametrize("care_level", [0, 6, None, "x", True])
    def test_invalid_care_level(self, resolver, care_level):
        with pytest.raises(UnsupportedServiceUnits):
            resolver.resolve(care_level, FacilityScale.NORMAL)

    def test_unsupported_scale(self, resolver):
        with pytest.raises(UnsupportedServiceUnits):
            resolver.resolve(1, FacilityScale.LARGE_1)

    def test_unsupported_duration(self, resolver):
        with pytest.raises(UnsupportedServiceUnits):
            resolver.resolve(1, FacilityScale.NORMAL, "h3_to_4")
