"""Billing domain errors

Every error carries a stable ``code`` that use cases copy into the
``Error`` of a failed Result.
"""

from datetime import date
from typing import Optional


class BillingError(Exception):
    """Base class for billing computation failures"""

    code = "billing_error"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class InvalidRoundingInput(BillingError, ValueError):
    """Negative or non-numeric amount passed to a rounding strategy"""

    code = "invalid_rounding_input"


class UnsupportedArea(BillingError):
    """Tenant city or facility scale is outside the supported tariff areas"""

    code = "unsupported_area"


class UnsupportedServiceUnits(BillingError):
    """No base unit value exists for the care level / scale / duration"""

    code = "unsupported_service_units"


class MissingPriceListing(BillingError):
    """No active, date-valid price listing for a required code"""

    code = "missing_price_listing"

    def __init__(self, price_code: str, service_date: date):
        super().__init__(
            f"No valid price listing for code {price_code} on {service_date.isoformat()}",
            reason=f"code={price_code}, date={service_date.isoformat()}",
        )
        self.price_code = price_code
        self.service_date = service_date


class MissingBenefitLimit(BillingError):
    """Client has no valid structured care-level / copayment data"""

    code = "missing_benefit_limit"


class DuplicateBillingLine(BillingError):
    """Attendance has already been billed for this billing code"""

    code = "duplicate_billing_line"

    def __init__(self, attendance_id: Optional[int], billing_code: str, reason: Optional[str] = None):
        super().__init__(
            f"Attendance {attendance_id} is already billed for code {billing_code}",
            reason=reason or f"attendance_id={attendance_id}, billing_code={billing_code}",
        )
        self.attendance_id = attendance_id
        self.billing_code = billing_code


class ConcurrentRegenerationConflict(BillingError):
    """Another run holds the generation lock for the same invoice"""

    code = "concurrent_regeneration_conflict"
    retryable = True


class UnknownClient(BillingError):
    """Attendance refers to a client that does not exist in the tenant"""

    code = "client_not_found"
