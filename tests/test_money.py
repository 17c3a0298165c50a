"""
Unit Tests for money helpers
"""

from decimal import Decimal

import pytest

from quote_engine.money import quantize_money, round_up_to_ten, to_decimal, to_optional_decimal


class TestToDecimal:
    """Lenient coercion of raw form values."""

    def test_int_and_float(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_numeric_string(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")

    @pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf"), float("-inf"), Decimal("NaN"), [], {}])
    def test_malformed_becomes_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_bool_is_not_a_number(self):
        assert to_decimal(True) == Decimal("0")

    def test_negative_is_kept(self):
        assert to_decimal(-3.5) == Decimal("-3.5")


class TestToOptionalDecimal:

    def test_none_stays_unset(self):
        assert to_optional_decimal(None) is None

    def test_emptied_field_stays_unset(self):
        assert to_optional_decimal("  ") is None

    def test_non_finite_becomes_zero(self):
        assert to_optional_decimal(float("nan")) == Decimal("0")

    def test_value(self):
        assert to_optional_decimal("1000") == Decimal("1000")


class TestQuantizeMoney:
    """Test the money rounding utility."""

    def test_rounds_up_at_half(self):
        assert quantize_money(Decimal("0.005")) == Decimal("0.01")

    def test_rounds_down_below_half(self):
        assert quantize_money(Decimal("0.004")) == Decimal("0.00")

    def test_truncates_extra_precision(self):
        assert quantize_money(Decimal("813.0081300813")) == Decimal("813.01")

    def test_large_amount_keeps_cents(self):
        assert quantize_money(Decimal("1e27")) == Decimal("1000000000000000000000000000.00")

    def test_amount_beyond_cents_is_unrounded(self):
        assert quantize_money(Decimal("1e999999")) == Decimal("1e999999")

    def test_non_finite_becomes_zero(self):
        assert quantize_money(Decimal("NaN")) == Decimal("0")


class TestRoundUpToTen:

    def test_rounds_up(self):
        assert round_up_to_ten(Decimal("771.21")) == Decimal("780")

    def test_exact_multiple_unchanged(self):
        assert round_up_to_ten(Decimal("600")) == Decimal("600")

    def test_just_above_multiple(self):
        assert round_up_to_ten(Decimal("600.001")) == Decimal("610")

    def test_zero(self):
        assert round_up_to_ten(Decimal("0")) == Decimal("0")

    def test_negative_rounds_toward_positive(self):
        assert round_up_to_ten(Decimal("-15")) == Decimal("-10")
