"""Care-insurance billing computation (pure domain)"""
from .units import CareServiceUnit, YenAmount
from .rounding import HalfUp, Truncate, RoundingStrategy, RoundingMode, RoundingPolicy
from .additions import Addition, applicable_additions
from .area_grade import AreaGrade, AreaGradeResolver, FacilityScale
from .basic_units import BasicUnitResolver, DurationCategory
from .benefit_limit import BenefitLimit, BenefitLimitResolver
from .improvement import ImprovementAdditionCalculator
from .price_catalog import PriceCatalog, PriceQuote
from .calculation import Apportionment, CalculatedInvoice, CalculatedLine, InvoiceCalculator, apportion
from .receipt import MonthlyReceiptAggregator, ReceiptItem
from .transmission_csv import TransmissionCsvGenerator
from .errors import (
    BillingError,
    InvalidRoundingInput,
    UnsupportedArea,
    UnsupportedServiceUnits,
    MissingPriceListing,
    MissingBenefitLimit,
    DuplicateBillingLine,
    ConcurrentRegenerationConflict,
    UnknownClient,
)

__all__ = [
    "CareServiceUnit",
    "YenAmount",
    "HalfUp",
    "Truncate",
    "RoundingStrategy",
    "RoundingMode",
    "RoundingPolicy",
    "Addition",
    "applicable_additions",
    "AreaGrade",
    "AreaGradeResolver",
    "FacilityScale",
    "BasicUnitResolver",
    "DurationCategory",
    "BenefitLimit",
    "BenefitLimitResolver",
    "ImprovementAdditionCalculator",
    "PriceCatalog",
    "PriceQuote",
    "Apportionment",
    "CalculatedInvoice",
    "CalculatedLine",
    "InvoiceCalculator",
    "apportion",
    "MonthlyReceiptAggregator",
    "ReceiptItem",
    "TransmissionCsvGenerator",
    "BillingError",
    "InvalidRoundingInput",
    "UnsupportedArea",
    "UnsupportedServiceUnits",
    "MissingPriceListing",
    "MissingBenefitLimit",
    "DuplicateBillingLine",
    "ConcurrentRegenerationConflict",
    "UnknownClient",
]
