"""Benefit limit resolution

The monthly unit ceiling and copayment rate come only from structured client
fields. Missing or invalid data is a hard failure, never a default.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict
from src.domain.billing.errors import MissingBenefitLimit
from src.domain.billing.units import CareServiceUnit

# 区分支給限度基準額 for 要介護1..5
STATUTORY_CEILING_UNITS = {
    1: 16765,
    2: 19705,
    3: 27048,
    4: 30938,
    5: 36217,
}

COPAYMENT_RATES = {
    1: Decimal("0.1"),
    2: Decimal("0.2"),
    3: Decimal("0.3"),
}


class BenefitLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    care_level: int
    ceiling_units: CareServiceUnit
    copayment_rate: Decimal
    copayment_rate_code: int


class BenefitLimitResolver:
    def limit_for(self, client, billing_month: date) -> BenefitLimit:
        """
        Resolve the ceiling and copayment rate for a client's billing month

        Args:
            client: object exposing care_level, benefit_limit_units,
                copayment_rate and the optional certification window
            billing_month: first day of the billing month

        Raises:
            MissingBenefitLimit: care data is absent, invalid, or the care
                certification does not cover the billing month
        """
        client_id = getattr(client, "id", None)
        care_level = self._care_level(client, client_id)
        self._check_certification(client, client_id, billing_month)

        override = getattr(client, "benefit_limit_units", None)
        if override is None:
            ceiling = STATUTORY_CEILING_UNITS[care_level]
        elif isinstance(override, bool) or not isinstance(override, int) or override < 0:
            raise MissingBenefitLimit(
                f"Client {client_id} has an invalid benefit_limit_units",
                reason=f"benefit_limit_units={override!r}",
            )
        else:
            ceiling = override

        rate_code = getattr(client, "copayment_rate", None)
        rate = COPAYMENT_RATES.get(rate_code) if not isinstance(rate_code, bool) else None
        if rate is None:
            raise MissingBenefitLimit(
                f"Client {client_id} has no valid copayment rate",
                reason=f"copayment_rate={rate_code!r}",
            )

        return BenefitLimit(
            care_level=care_level,
            ceiling_units=CareServiceUnit(ceiling),
            copayment_rate=rate,
            copayment_rate_code=rate_code,
        )

    @staticmethod
    def _care_level(client, client_id) -> int:
        care_level = getattr(client, "care_level", None)
        if care_level is None:
            raise MissingBenefitLimit(
                f"Client {client_id} has no care level",
                reason="care_level is not set",
            )
        if isinstance(care_level, bool) or not isinstance(care_level, int) or care_level not in STATUTORY_CEILING_UNITS:
            raise MissingBenefitLimit(
                f"Client {client_id} has an invalid care level",
                reason=f"care_level={care_level!r}",
            )
        return care_level

    @staticmethod
    def _check_certification(client, client_id, billing_month: date) -> None:
        valid_from: Optional[date] = getattr(client, "certification_valid_from", None)
        valid_to: Optional[date] = getattr(client, "certification_valid_to", None)
        if valid_from is not None and valid_from > billing_month:
            raise MissingBenefitLimit(
                f"Client {client_id} care certification starts after {billing_month.isoformat()}",
                reason=f"certification_valid_from={valid_from.isoformat()}",
            )
        if valid_to is not None and valid_to < billing_month:
            raise MissingBenefitLimit(
                f"Client {client_id} care certification expired before {billing_month.isoformat()}",
                reason=f"certification_valid_to={valid_to.isoformat()}",
            )
