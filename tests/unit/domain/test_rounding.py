"""Unit tests for rounding strategies and the rounding policy

Tests cover:
- HalfUp ties away from zero, Truncate drops the fraction
- Negative and non-numeric input is rejected
- Policy built from configuration values
"""

import pytest
from decimal import Decimal

from src.domain.billing import HalfUp, InvalidRoundingInput, RoundingMode, RoundingPolicy, Truncate


class TestHalfUp:
    def test_rounds_tie_up(self):
        assert HalfUp().apply(Decimal("4107.50")) == 4108

    def test_rounds_below_half_down(self):
        assert HalfUp().apply(Decimal("4107.49")) == 4107

    def test_float_input_uses_decimal_value(self):
        """0.5 ties must not be lost to binary float expansion"""
        assert HalfUp().apply(4107.5) == 4108
        assert HalfUp().apply(0.5) == 1

    def test_integer_input_unchanged(self):
        assert HalfUp().apply(17028) == 17028

    def test_negative_input_raises(self):
        with pytest.raises(InvalidRoundingInput):
            HalfUp().apply(Decimal("-1.2"))


class TestTruncate:
    def test_drops_fraction(self):
        assert Truncate().apply(Decimal("16698.80")) == 16698

    def test_exact_value_unchanged(self):
        assert Truncate().apply(Decimal("182738.0")) == 182738

    def test_negative_input_raises(self):
        with pytest.raises(InvalidRoundingInput):
            Truncate().apply(Decimal("-1.2"))

    @pytest.mark.parametrize("amount", ["abc", float("nan"), None, True])
    def test_non_numeric_input_raises(self, amount):
        with pytest.raises(InvalidRoundingInput):
            Truncate().apply(amount)


class TestStrategyOrdering:
    @pytest.mark.parametrize(
        "amount",
        [Decimal("0"), Decimal("0.4"), Decimal("0.5"), Decimal("18273.8"), Decimal("2866.7"), Decimal("99999.999")],
    )
    def test_half_up_never_below_truncate(self, amount):
        assert HalfUp().apply(amount) >= Truncate().apply(amount)
        assert HalfUp().apply(amount) - Truncate().apply(amount) <= 1


class TestRoundingPolicy:
    def test_defaults(self):
        policy = RoundingPolicy()

        assert policy.line_total.strategy() == HalfUp()
        assert policy.unit_conversion.strategy() == Truncate()
        assert policy.excess_conversion.strategy() == Truncate()
        assert policy.insured_copayment.strategy() == HalfUp()
        assert policy.improvement_units.strategy() == HalfUp()

    def test_from_config(self):
        """
        Given: Configuration overriding the insured copayment rounding
        When: The policy is built from it
        Then: The override applies and other steps keep their defaults
        """
        class Config:
            ROUNDING_INSURED_COPAYMENT = "truncate"

        policy = RoundingPolicy.from_config(Config)

        assert policy.insured_copayment == RoundingMode.TRUNCATE
        assert policy.unit_conversion == RoundingMode.TRUNCATE
        assert policy.line_total == RoundingMode.HALF_UP

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            RoundingPolicy(line_total="bankers")
