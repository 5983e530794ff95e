"""Monthly invoice calculation

Pure computation: takes one client's month of attendance, contracts, price
catalog and benefit limit, and returns the invoice lines and the apportionment
between insurance and the client. Nothing here touches the database.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple
from pydantic import BaseModel, ConfigDict, Field
from src.domain.billing import additions as addition_catalog
from src.domain.billing.benefit_limit import BenefitLimit
from src.domain.billing.errors import DuplicateBillingLine, MissingPriceListing
from src.domain.billing.improvement import ImprovementAdditionCalculator
from src.domain.billing.price_catalog import PriceQuote
from src.domain.billing.rounding import RoundingPolicy
from src.domain.billing.units import CareServiceUnit, YenAmount

PRESENT = "present"
DEFAULT_BASE_NAME = "通所介護基本報酬"


class CalculatedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    attendance_id: Optional[int]
    price_item_id: Optional[int]
    billing_code: str
    service_code: str
    service_date: date
    item_name: str
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    units: int
    unit_price: int
    line_total: int
    sort_order: int
    details: Dict[str, object] = Field(default_factory=dict)


class Apportionment(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_units: CareServiceUnit
    insured_units: CareServiceUnit
    self_pay_units: CareServiceUnit
    improvement_units: CareServiceUnit
    unit_rate: Decimal
    copayment_rate: Decimal
    insured_amount: YenAmount
    self_pay_amount: YenAmount
    insurance_claim_amount: YenAmount
    insured_copayment_amount: YenAmount
    excess_copayment_amount: YenAmount
    total_amount: YenAmount


class CalculatedInvoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: List[CalculatedLine]
    billed_days: int
    subtotal_amount: YenAmount
    apportionment: Apportionment


def apportion(
    total_units: CareServiceUnit,
    limit: BenefitLimit,
    unit_rate: Decimal,
    policy: RoundingPolicy,
    improvement_rate=None,
) -> Apportionment:
    """
    Split a month's units between insurance and the client

    insured_units = min(total, ceiling); self_pay_units = total - ceiling when
    exceeded. Both are converted to yen with the area rate. The client pays
    the copayment share of the insured yen and all of the self-pay yen.
    """
    ceiling = limit.ceiling_units
    if total_units <= ceiling:
        insured_units = total_units
        self_pay_units = CareServiceUnit(0)
    else:
        insured_units = ceiling
        self_pay_units = total_units - ceiling

    improvement_units = CareServiceUnit(0)
    if improvement_rate is not None:
        calculator = ImprovementAdditionCalculator(policy.improvement_units.strategy())
        improvement_units = calculator.calculate_units(insured_units, improvement_rate)
    covered_units = insured_units + improvement_units

    insured_amount = YenAmount(
        policy.unit_conversion.strategy().apply(Decimal(covered_units.value) * unit_rate)
    )
    self_pay_amount = YenAmount(
        policy.excess_conversion.strategy().apply(Decimal(self_pay_units.value) * unit_rate)
    )
    insured_copayment = YenAmount(
        policy.insured_copayment.strategy().apply(
            Decimal(insured_amount.value) * limit.copayment_rate
        )
    )
    insurance_claim = insured_amount - insured_copayment
    excess_copayment = self_pay_amount

    return Apportionment(
        total_units=total_units,
        insured_units=insured_units,
        self_pay_units=self_pay_units,
        improvement_units=improvement_units,
        unit_rate=unit_rate,
        copayment_rate=limit.copayment_rate,
        insured_amount=insured_amount,
        self_pay_amount=self_pay_amount,
        insurance_claim_amount=insurance_claim,
        insured_copayment_amount=insured_copayment,
        excess_copayment_amount=excess_copayment,
        total_amount=insured_copayment + excess_copayment,
    )


def contract_active_on(contracts: Iterable, service_date: date):
    """Contract covering service_date, latest start first; None when uncovered"""
    active = [
        contract for contract in contracts
        if contract.start_on <= service_date
        and (contract.end_on is None or contract.end_on >= service_date)
    ]
    if not active:
        return None
    return max(active, key=lambda contract: (contract.start_on, contract.id or 0))


def _status_value(status) -> str:
    return getattr(status, "value", status)


class InvoiceCalculator:
    """
    Builds invoice lines and totals for one client and month

    Usage:
        calculator = InvoiceCalculator(policy, base_price_code="day_service_basic",
                                       base_service_code="151111")
        result = calculator.calculate(
            billing_month=date(2024, 4, 1),
            attendances=attendances,
            contracts=contracts,
            base_units=CareServiceUnit(658),
            price_lookup=catalog.lookup,
            limit=limit,
            unit_rate=Decimal("10.90"),
        )
    """

    def __init__(
        self,
        policy: RoundingPolicy,
        base_price_code: str = "day_service_basic",
        base_service_code: str = "151111",
    ):
        self.policy = policy
        self.base_price_code = base_price_code
        self.base_service_code = base_service_code

    def calculate(
        self,
        billing_month: date,
        attendances: Iterable,
        contracts: Iterable,
        base_units: CareServiceUnit,
        price_lookup: Callable[[str, date], Optional[PriceQuote]],
        limit: BenefitLimit,
        unit_rate: Decimal,
        improvement_rate=None,
        billed_keys: Optional[Set[Tuple[int, str]]] = None,
    ) -> CalculatedInvoice:
        """
        Args:
            billed_keys: (attendance_id, billing_code) pairs already billed on
                other invoices; hitting one raises DuplicateBillingLine

        Raises:
            MissingPriceListing: a required code has no valid price on a day
            DuplicateBillingLine: an attendance/code pair would be billed twice
        """
        contracts = list(contracts)
        seen: Set[Tuple[int, str]] = set(billed_keys or ())
        lines: List[CalculatedLine] = []
        total_units = CareServiceUnit(0)
        billed_days = 0

        billable = sorted(
            (a for a in attendances if _status_value(a.status) == PRESENT),
            key=lambda a: (a.service_date, a.id or 0),
        )
        for attendance in billable:
            if not self._in_month(attendance.service_date, billing_month):
                continue
            contract = contract_active_on(contracts, attendance.service_date)
            if contract is None:
                continue

            day_additions = addition_catalog.ordered(
                addition_catalog.applicable_additions(contract.services)
            )
            lines.append(self._line(
                attendance=attendance,
                billing_code=self.base_price_code,
                price_code=self.base_price_code,
                service_code=self.base_service_code,
                default_name=DEFAULT_BASE_NAME,
                units=base_units,
                sort_order=0,
                price_lookup=price_lookup,
                seen=seen,
            ))
            for addition in day_additions:
                lines.append(self._line(
                    attendance=attendance,
                    billing_code=addition.code,
                    price_code=addition.price_code,
                    service_code=addition.service_code,
                    default_name=addition.display_name,
                    units=addition.units,
                    sort_order=addition.sort_order,
                    price_lookup=price_lookup,
                    seen=seen,
                ))

            total_units = total_units + base_units + addition_catalog.total_units(day_additions)
            billed_days += 1

        apportionment = apportion(
            total_units=total_units,
            limit=limit,
            unit_rate=unit_rate,
            policy=self.policy,
            improvement_rate=improvement_rate,
        )
        # Converted cost of the month: covered plus self-pay yen
        subtotal = apportionment.insured_amount + apportionment.self_pay_amount
        return CalculatedInvoice(
            lines=lines,
            billed_days=billed_days,
            subtotal_amount=subtotal,
            apportionment=apportionment,
        )

    def _line(
        self,
        attendance,
        billing_code: str,
        price_code: str,
        service_code: str,
        default_name: str,
        units: CareServiceUnit,
        sort_order: int,
        price_lookup,
        seen: Set[Tuple[int, str]],
    ) -> CalculatedLine:
        key = (attendance.id, billing_code)
        if attendance.id is not None and key in seen:
            raise DuplicateBillingLine(attendance.id, billing_code)
        seen.add(key)

        quote = price_lookup(price_code, attendance.service_date)
        if quote is None:
            raise MissingPriceListing(price_code, attendance.service_date)

        quantity = Decimal("1")
        line_total = self.policy.line_total.strategy().apply(quantity * quote.unit_price)
        return CalculatedLine(
            attendance_id=attendance.id,
            price_item_id=quote.price_item_id,
            billing_code=billing_code,
            service_code=service_code,
            service_date=attendance.service_date,
            item_name=quote.name or default_name,
            quantity=quantity,
            units=units.value,
            unit_price=quote.unit_price,
            line_total=line_total,
            sort_order=sort_order,
            details={
                "price_code": price_code,
                "units": units.value,
                "attendance_status": PRESENT,
            },
        )

    @staticmethod
    def _in_month(service_date: date, billing_month: date) -> bool:
        return service_date.year == billing_month.year and service_date.month == billing_month.month
