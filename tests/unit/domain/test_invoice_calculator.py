"""Unit tests for invoice calculation and apportionment

Tests cover:
- 22-day month for a care level 1 client with bathing and training
- Ceiling split into insured and self-pay units
- Conservation of the subtotal between insurance and client
- Improvement addition on insured units
- Present-only, in-month and contract-covered days
- Missing prices and duplicate billing
"""

import pytest
from datetime import date
from decimal import Decimal

from src.domain.attendance import Attendance, AttendanceStatus
from src.domain.billing import (
    BenefitLimit,
    CareServiceUnit,
    DuplicateBillingLine,
    InvoiceCalculator,
    MissingPriceListing,
    PriceCatalog,
    RoundingPolicy,
    YenAmount,
    apportion,
)
from tests.fixtures.billing_data import (
    APRIL_2024_WEEKDAYS,
    make_attendances,
    make_contract,
    make_price_items,
)

APRIL = date(2024, 4, 1)
RATE = Decimal("10.90")


def _limit(ceiling=16765, copayment_rate=Decimal("0.1"), code=1):
    return BenefitLimit(
        care_level=1,
        ceiling_units=CareServiceUnit(ceiling),
        copayment_rate=copayment_rate,
        copayment_rate_code=code,
    )


@pytest.fixture
def calculator():
    return InvoiceCalculator(RoundingPolicy())


def _calculate(calculator, attendances=None, contracts=None, price_items=None, **kwargs):
    return calculator.calculate(
        billing_month=APRIL,
        attendances=make_attendances() if attendances is None else attendances,
        contracts=[make_contract()] if contracts is None else contracts,
        base_units=CareServiceUnit(658),
        price_lookup=PriceCatalog(make_price_items() if price_items is None else price_items).lookup,
        limit=kwargs.pop("limit", _limit()),
        unit_rate=RATE,
        **kwargs,
    )


class TestTwentyTwoDayMonth:
    def test_units_and_split(self, calculator):
        """
        Given: 22 present days, care level 1, bathing and training every day
        When: The month is calculated
        Then: 774 units/day, 17028 total, 16765 insured, 263 self-pay
        """
        result = _calculate(calculator)
        apportionment = result.apportionment

        assert result.billed_days == 22
        assert apportionment.total_units == CareServiceUnit(17028)
        assert apportionment.insured_units == CareServiceUnit(16765)
        assert apportionment.self_pay_units == CareServiceUnit(263)

    def test_amounts(self, calculator):
        result = _calculate(calculator)
        apportionment = result.apportionment

        # trunc(16765 * 10.90 = 182738.5)
        assert apportionment.insured_amount == YenAmount(182738)
        # half_up(18273.8)
        assert apportionment.insured_copayment_amount == YenAmount(18274)
        assert apportionment.insurance_claim_amount == YenAmount(164464)
        # trunc(263 * 10.90 = 2866.7)
        assert apportionment.excess_copayment_amount == YenAmount(2866)
        assert apportionment.total_amount == YenAmount(21140)

    def test_lines(self, calculator):
        result = _calculate(calculator)

        assert len(result.lines) == 66
        assert sum(line.line_total for line in result.lines) == 185592
        # 182738 insured + 2866 self-pay
        assert result.subtotal_amount == YenAmount(185604)

        first_day = result.lines[:3]
        assert [line.billing_code for line in first_day] == [
            "day_service_basic",
            "bathing",
            "individual_functional_training",
        ]
        assert [line.service_code for line in first_day] == ["151111", "155301", "155052"]
        assert [line.units for line in first_day] == [658, 40, 76]
        assert all(line.quantity == Decimal("1") for line in result.lines)

    def test_improvement_addition(self, calculator):
        """
        Given: Improvement rate 0.245
        When: The month is calculated
        Then: 4107 improvement units are added to the insured amount
        """
        result = _calculate(calculator, improvement_rate=Decimal("0.245"))
        apportionment = result.apportionment

        assert apportionment.improvement_units == CareServiceUnit(4107)
        # trunc((16765 + 4107) * 10.90 = 227504.8)
        assert apportionment.insured_amount == YenAmount(227504)
        assert apportionment.insured_copayment_amount == YenAmount(22750)
        assert apportionment.total_amount == YenAmount(22750 + 2866)
        assert result.subtotal_amount == YenAmount(227504 + 2866)


class TestSubtotal:
    @pytest.mark.parametrize("days", [1, 10, 21, 22])
    @pytest.mark.parametrize("copayment_rate", [Decimal("0.1"), Decimal("0.2"), Decimal("0.3")])
    def test_subtotal_splits_into_claim_and_client_share(self, calculator, days, copayment_rate):
        """
        Given: A month under or over the ceiling
        When: The month is calculated
        Then: Claim, insured copayment and excess add up to the subtotal
        """
        result = _calculate(
            calculator,
            attendances=make_attendances(days=APRIL_2024_WEEKDAYS[:days]),
            limit=_limit(copayment_rate=copayment_rate),
        )
        apportionment = result.apportionment

        assert (
            apportionment.insurance_claim_amount
            + apportionment.insured_copayment_amount
            + apportionment.excess_copayment_amount
            == result.subtotal_amount
        )

    def test_under_ceiling_claim_and_copay_equal_subtotal(self, calculator):
        """
        Given: 10 present days with bathing and training, under the ceiling
        When: The month is calculated
        Then: Insurance claim plus copayment is the whole subtotal
        """
        result = _calculate(calculator, attendances=make_attendances(days=APRIL_2024_WEEKDAYS[:10]))
        apportionment = result.apportionment

        assert apportionment.excess_copayment_amount == YenAmount(0)
        # trunc(7740 * 10.90 = 84366.0)
        assert result.subtotal_amount == YenAmount(84366)
        assert (
            apportionment.insurance_claim_amount + apportionment.insured_copayment_amount
            == result.subtotal_amount
        )


class TestApportion:
    def test_under_ceiling_has_no_self_pay(self):
        result = apportion(CareServiceUnit(10000), _limit(), RATE, RoundingPolicy())

        assert result.insured_units == CareServiceUnit(10000)
        assert result.self_pay_units == CareServiceUnit(0)
        assert result.excess_copayment_amount == YenAmount(0)

    def test_exactly_at_ceiling(self):
        result = apportion(CareServiceUnit(16765), _limit(), RATE, RoundingPolicy())

        assert result.insured_units == CareServiceUnit(16765)
        assert result.self_pay_units == CareServiceUnit(0)

    @pytest.mark.parametrize("total_units", [0, 1, 774, 16764, 16765, 16766, 17028, 40000])
    @pytest.mark.parametrize("copayment_rate", [Decimal("0.1"), Decimal("0.2"), Decimal("0.3")])
    def test_conservation(self, total_units, copayment_rate):
        """Insurance claim plus client copayment always equals the insured amount"""
        result = apportion(
            CareServiceUnit(total_units), _limit(copayment_rate=copayment_rate), RATE, RoundingPolicy()
        )

        assert result.insured_units + result.self_pay_units == CareServiceUnit(total_units)
        assert (
            result.insurance_claim_amount + result.insured_copayment_amount
            == result.insured_amount
        )
        assert (
            result.insured_copayment_amount + result.excess_copayment_amount
            == result.total_amount
        )

    def test_copayment_rounding_follows_policy(self):
        policy = RoundingPolicy(insured_copayment="truncate")
        result = apportion(CareServiceUnit(16765), _limit(), RATE, policy)

        assert result.insured_copayment_amount == YenAmount(18273)
        assert result.insurance_claim_amount == YenAmount(164465)


class TestDaySelection:
    def test_only_present_days_billed(self, calculator):
        attendances = make_attendances(days=APRIL_2024_WEEKDAYS[:3])
        attendances.append(
            Attendance(
                id=99,
                tenant_id="tenant_meguro",
                client_id=1,
                service_date=date(2024, 4, 25),
                status=AttendanceStatus.ABSENT,
            )
        )

        result = _calculate(calculator, attendances=attendances)

        assert result.billed_days == 3
        assert result.apportionment.total_units == CareServiceUnit(774 * 3)

    def test_days_outside_month_ignored(self, calculator):
        attendances = make_attendances(days=[date(2024, 3, 29), date(2024, 4, 1), date(2024, 5, 1)])

        result = _calculate(calculator, attendances=attendances)

        assert result.billed_days == 1

    def test_days_without_contract_skipped(self, calculator):
        contract = make_contract(start_on=date(2024, 4, 15))

        result = _calculate(calculator, contracts=[contract])

        assert all(line.service_date >= date(2024, 4, 15) for line in result.lines)
        assert result.billed_days == len([d for d in APRIL_2024_WEEKDAYS if d >= date(2024, 4, 15)])

    def test_contract_without_additions(self, calculator):
        result = _calculate(calculator, contracts=[make_contract(services={})])

        assert len(result.lines) == 22
        assert result.apportionment.total_units == CareServiceUnit(658 * 22)

    def test_no_attendance_gives_empty_invoice(self, calculator):
        result = _calculate(calculator, attendances=[])

        assert result.lines == []
        assert result.apportionment.total_amount == YenAmount(0)


class TestFailures:
    def test_missing_price_listing(self, calculator):
        """
        Given: No bathing price listing
        When: A day with bathing is calculated
        Then: MissingPriceListing names the code and date
        """
        price_items = make_price_items(include=("day_service_basic", "individual_functional_training"))

        with pytest.raises(MissingPriceListing) as exc_info:
            _calculate(calculator, price_items=price_items)

        assert exc_info.value.price_code == "bathing"
        assert exc_info.value.service_date == APRIL_2024_WEEKDAYS[0]

    def test_already_billed_attendance(self, calculator):
        with pytest.raises(DuplicateBillingLine) as exc_info:
            _calculate(calculator, billed_keys={(1, "bathing")})

        assert exc_info.value.attendance_id == 1
        assert exc_info.value.billing_code == "bathing"

    def test_same_attendance_twice(self, calculator):
        attendances = make_attendances(days=[date(2024, 4, 1)])
        attendances.append(attendances[0])

        with pytest.raises(DuplicateBillingLine):
            _calculate(calculator, attendances=attendances)
