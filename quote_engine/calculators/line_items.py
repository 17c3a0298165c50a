"""
Line-Item Aggregator

Reduces line-item sequences into category subtotals.
"""

from decimal import Decimal
from typing import Iterable

from ..models import CategorySubtotals, QuoteContext
from ..money import ZERO, to_decimal


class LineItemAggregator:
    """Sums quantity × unit price per category."""

    def calculate(self, ctx: QuoteContext) -> CategorySubtotals:
        """Aggregate every section of the quote."""
        inputs = ctx.inputs
        return CategorySubtotals(
            products_total=self.aggregate(inputs.products),
            surcharges_total=self.aggregate(inputs.surcharges),
            hardware_total=self.aggregate(inputs.hardware),
            installation_total=self.aggregate(inputs.installation),
        )

    def aggregate(self, items: Iterable) -> Decimal:
        """
        Sum all priced pairs of all items.

        A bundled row (door + frame + trim + blank) yields several pairs and
        all of them count. Malformed numbers are treated as zero, so this
        never fails on a half-edited row; under pricing_context a product or
        sum that overflows counts as zero too.
        """
        total = ZERO
        for item in items or ():
            for quantity, unit_price in item.priced_pairs():
                total += to_decimal(to_decimal(quantity) * to_decimal(unit_price))
        return to_decimal(total)
