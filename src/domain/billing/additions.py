"""Addition (surcharge) catalog

The catalog is a closed enumeration. Each member is a fixed descriptor and is
enabled for a service day by one flag of the client's active contract.
"""

from enum import Enum
from typing import Iterable, Mapping, Optional
from src.domain.billing.units import CareServiceUnit


class Addition(Enum):
    """Surcharges billable on top of the day-service base units"""

    BATHING = "bathing"
    INDIVIDUAL_FUNCTIONAL_TRAINING = "individual_functional_training"

    @property
    def code(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DEFINITIONS[self]["name"]

    @property
    def units(self) -> CareServiceUnit:
        return _DEFINITIONS[self]["units"]

    @property
    def service_code(self) -> str:
        return _DEFINITIONS[self]["service_code"]

    @property
    def price_code(self) -> str:
        return _DEFINITIONS[self]["price_code"]

    @property
    def flag(self) -> str:
        return _DEFINITIONS[self]["flag"]

    @property
    def sort_order(self) -> int:
        return _CATALOG_ORDER.index(self) + 1


_DEFINITIONS = {
    Addition.BATHING: {
        "name": "入浴介助加算I",
        "units": CareServiceUnit(40),
        "service_code": "155301",
        "price_code": "bathing",
        "flag": "bath",
    },
    Addition.INDIVIDUAL_FUNCTIONAL_TRAINING: {
        "name": "個別機能訓練加算Iロ",
        "units": CareServiceUnit(76),
        "service_code": "155052",
        "price_code": "individual_functional_training",
        "flag": "rehabilitation",
    },
}

_CATALOG_ORDER = tuple(Addition)


def _flag_enabled(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def applicable_additions(service_flags: Optional[Mapping[str, object]]) -> frozenset:
    """Additions whose enabling contract flag is set"""
    flags = service_flags or {}
    return frozenset(
        addition for addition in Addition if _flag_enabled(flags.get(addition.flag))
    )


def ordered(additions: Iterable[Addition]) -> list:
    return sorted(additions, key=lambda addition: addition.sort_order)


def total_units(additions: Iterable[Addition]) -> CareServiceUnit:
    return CareServiceUnit.total(addition.units for addition in additions)


def find_by_code(code: str) -> Optional[Addition]:
    try:
        return Addition(code)
    except ValueError:
        return None
