"""
Unit Tests for the Line-Item Aggregator
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.line_items import LineItemAggregator
from quote_engine.models import DoorRow, LineItem, PricedPart, QuoteContext, QuoteInputs


def item(quantity, unit_price, item_id="i"):
    return LineItem(id=item_id, quantity=quantity, unit_price=unit_price)


def door_row(door=(0, 0), frame=(0, 0), trim=(0, 0), blank=(0, 0)):
    return DoorRow(
        id="row",
        door=PricedPart(*door),
        frame=PricedPart(*frame),
        trim=PricedPart(*trim),
        blank=PricedPart(*blank),
    )


class TestAggregate:
    """Test quantity × unit price sums."""

    @pytest.fixture
    def aggregator(self):
        return LineItemAggregator()

    def test_empty_is_zero(self, aggregator):
        assert aggregator.aggregate([]) == Decimal("0")

    def test_none_is_zero(self, aggregator):
        assert aggregator.aggregate(None) == Decimal("0")

    def test_single_item(self, aggregator):
        """2 × 500 = 1000"""
        assert aggregator.aggregate([item(2, 500)]) == Decimal("1000")

    def test_multiple_items(self, aggregator):
        """1 × 100 + 1 × 200 + 1 × 50 = 350"""
        assert aggregator.aggregate([item(1, 100), item(1, 200), item(1, 50)]) == Decimal("350")

    def test_negative_quantity_for_corrections(self, aggregator):
        assert aggregator.aggregate([item(3, 100), item(-1, 100)]) == Decimal("200")

    def test_malformed_values_count_as_zero(self, aggregator):
        items = [item(None, 100), item(2, float("nan")), item("abc", 5), item(2, 100)]
        assert aggregator.aggregate(items) == Decimal("200")

    def test_numeric_strings(self, aggregator):
        assert aggregator.aggregate([item("3", "12.5")]) == Decimal("37.5")

    def test_floats_are_exact(self, aggregator):
        """0.1 × 3 is exactly 0.3 in Decimal."""
        assert aggregator.aggregate([item(0.1, 3)]) == Decimal("0.3")

    @pytest.mark.parametrize("first,second", [
        ([], []),
        ([item(1, 10)], [item(2, 20)]),
        ([item(1.5, 3.3), item(-2, 7)], [item(4, 0.25)]),
    ])
    def test_additivity(self, aggregator, first, second):
        assert aggregator.aggregate(first + second) == aggregator.aggregate(first) + aggregator.aggregate(second)


class TestDoorRows:
    """Rows that bundle several priced components."""

    @pytest.fixture
    def aggregator(self):
        return LineItemAggregator()

    def test_door_only(self, aggregator):
        assert aggregator.aggregate([door_row(door=(2, 500))]) == Decimal("1000")

    def test_all_components_summed(self, aggregator):
        """2×500 + 2×200 + 1×150 + 1×100 = 1650"""
        row = door_row(door=(2, 500), frame=(2, 200), trim=(1, 150), blank=(1, 100))
        assert aggregator.aggregate([row]) == Decimal("1650")
        assert row.line_total == Decimal("1650")

    def test_multiple_rooms(self, aggregator):
        """Room 1: 500 + 200, room 2: 600 + 250 = 1550"""
        rows = [
            door_row(door=(1, 500), frame=(1, 200)),
            door_row(door=(1, 600), frame=(1, 250)),
        ]
        assert aggregator.aggregate(rows) == Decimal("1550")

    def test_missing_component_values(self, aggregator):
        row = door_row(door=(None, None), frame=(2, 100))
        assert aggregator.aggregate([row]) == Decimal("200")

    def test_from_dict_missing_parts(self):
        row = DoorRow.from_dict({"id": "r1", "frame": {"quantity": 3, "unit_price": 200}})
        assert row.line_total == Decimal("600")


class TestCalculate:

    def test_every_section(self):
        inputs = QuoteInputs(
            products=[item(1, 1000)],
            surcharges=[item(2, 25)],
            hardware=[item(1, 50)],
            installation=[item(1, 95)],
        )
        result = LineItemAggregator().calculate(QuoteContext(inputs=inputs))

        assert result.products_total == Decimal("1000")
        assert result.surcharges_total == Decimal("50")
        assert result.hardware_total == Decimal("50")
        assert result.installation_total == Decimal("95")

    def test_stored_line_total_is_ignored(self):
        line = LineItem.from_dict({"id": "x", "quantity": 2, "unit_price": 5, "line_total": 999})
        assert line.line_total == Decimal("10")
