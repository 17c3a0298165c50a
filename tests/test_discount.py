"""
Unit Tests for the Discount Resolver
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.discount import DiscountResolver
from quote_engine.models import CategorySubtotals, QuoteContext, QuoteInputs


class TestResolve:

    @pytest.fixture
    def resolver(self):
        return DiscountResolver()

    def test_percent_only(self, resolver):
        """10% of 1000 = 100"""
        result = resolver.resolve(Decimal("1000"), Decimal("10"), True, Decimal("0"), False)
        assert result.discount_amount == Decimal("100")
        assert result.after_discount == Decimal("900")

    def test_percent_disabled(self, resolver):
        result = resolver.resolve(Decimal("1000"), Decimal("10"), False, Decimal("0"), False)
        assert result.discount_amount == Decimal("0")
        assert result.after_discount == Decimal("1000")

    def test_fixed_only(self, resolver):
        result = resolver.resolve(Decimal("1000"), Decimal("0"), True, Decimal("150"), True)
        assert result.discount_amount == Decimal("150")
        assert result.after_discount == Decimal("850")

    def test_fixed_disabled_is_ignored(self, resolver):
        result = resolver.resolve(Decimal("1000"), Decimal("0"), True, Decimal("150"), False)
        assert result.fixed_amount == Decimal("0")
        assert result.after_discount == Decimal("1000")

    @pytest.mark.parametrize("subtotal,percent,fixed", [
        ("1000", "10", "50"),
        ("1234.56", "7.5", "12.34"),
        ("0", "20", "10"),
    ])
    def test_both_are_additive(self, resolver, subtotal, percent, fixed):
        s, p, f = Decimal(subtotal), Decimal(percent), Decimal(fixed)
        result = resolver.resolve(s, p, True, f, True)
        assert result.discount_amount == s * p / 100 + f
        assert result.after_discount == s - result.discount_amount

    def test_discount_beyond_subtotal_goes_negative(self, resolver):
        result = resolver.resolve(Decimal("100"), Decimal("0"), False, Decimal("250"), True)
        assert result.after_discount == Decimal("-150")

    def test_malformed_percent_is_zero(self, resolver):
        result = resolver.resolve(Decimal("1000"), None, True, "abc", True)
        assert result.discount_amount == Decimal("0")


class TestCalculate:

    def test_applies_to_products_and_surcharges(self):
        ctx = QuoteContext(inputs=QuoteInputs(discount_percent=Decimal("10")))
        ctx.subtotals = CategorySubtotals(
            products_total=Decimal("800"),
            surcharges_total=Decimal("200"),
            hardware_total=Decimal("500"),
        )
        result = DiscountResolver().calculate(ctx)

        assert result.subtotal == Decimal("1000")
        assert result.discount_amount == Decimal("100")
