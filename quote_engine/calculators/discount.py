"""
Discount Resolver

Applies percentage and fixed-amount discounts to products + surcharges.
"""

from decimal import Decimal

from ..models import DiscountCalculation, QuoteContext
from ..money import HUNDRED, ZERO, to_decimal


class DiscountResolver:
    """Resolves the combined discount."""

    def calculate(self, ctx: QuoteContext) -> DiscountCalculation:
        inputs = ctx.inputs
        subtotals = ctx.subtotals
        return self.resolve(
            subtotal=subtotals.products_total + subtotals.surcharges_total,
            percent=inputs.discount_percent,
            percent_enabled=inputs.discount_percent_enabled,
            fixed=inputs.discount_fixed,
            fixed_enabled=inputs.discount_fixed_enabled,
        )

    def resolve(
        self,
        subtotal: Decimal,
        percent: Decimal,
        percent_enabled: bool,
        fixed: Decimal,
        fixed_enabled: bool
    ) -> DiscountCalculation:
        """
        Both discount types may be active at once and are additive.

        after_discount is not clamped: discounts larger than the subtotal
        produce a negative value and it is surfaced as-is.
        """
        subtotal = to_decimal(subtotal)
        percent_amount = subtotal * to_decimal(percent) / HUNDRED if percent_enabled else ZERO
        fixed_amount = to_decimal(fixed) if fixed_enabled else ZERO
        discount_amount = percent_amount + fixed_amount

        return DiscountCalculation(
            subtotal=subtotal,
            percent_amount=percent_amount,
            fixed_amount=fixed_amount,
            discount_amount=discount_amount,
            after_discount=subtotal - discount_amount,
        )
