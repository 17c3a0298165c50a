"""
Unit Tests for the Pricing Mode Reconciler

Standard figures used throughout: after discount 900, hardware 50,
installation 95 -> net 1045, VAT 240.35, gross 1285.35.
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.pricing_mode import PricingModeReconciler
from quote_engine.models import PricingMode
from quote_engine.money import quantize_money

TOLERANCE = Decimal("1e-9")


@pytest.fixture
def reconciler():
    return PricingModeReconciler()


def reconcile(reconciler, **kwargs):
    return reconciler.reconcile(Decimal("900"), Decimal("50"), Decimal("95"), **kwargs)


class TestStandard:

    def test_vat_rate_is_correct(self, reconciler):
        assert reconciler.VAT_RATE == Decimal("0.23")

    def test_standard_totals(self, reconciler):
        result = reconcile(reconciler)
        assert result.net_total == Decimal("1045")
        assert result.vat_amount == Decimal("240.35")
        assert result.gross_total == Decimal("1285.35")
        assert result.effective_base == Decimal("1285.35")
        assert result.pricing_mode == PricingMode.STANDARD

    def test_zero(self, reconciler):
        result = reconciler.reconcile(Decimal("0"), Decimal("0"), Decimal("0"))
        assert result.gross_total == Decimal("0")

    def test_negative_after_discount_is_not_clamped(self, reconciler):
        result = reconciler.reconcile(Decimal("-200"), Decimal("50"), Decimal("0"))
        assert result.net_total == Decimal("-150")


class TestManualOverride:

    @pytest.mark.parametrize("gross", ["1000", "0", "1234.56", "99999.99", "-50", "0.01"])
    def test_net_gross_round_trip(self, reconciler, gross):
        g = Decimal(gross)
        result = reconcile(reconciler, pricing_mode=PricingMode.MANUAL_OVERRIDE, manual_gross_override=g)

        assert result.gross_total == g
        assert abs(result.net_total * Decimal("1.23") - g) < TOLERANCE
        assert abs(result.net_total + result.vat_amount - g) < TOLERANCE

    def test_override_ignores_computed_total(self, reconciler):
        result = reconcile(reconciler, pricing_mode=PricingMode.MANUAL_OVERRIDE, manual_gross_override=Decimal("1230"))
        assert result.net_total == Decimal("1000")
        assert result.vat_amount == Decimal("230")

    def test_override_mode_without_value_is_standard(self, reconciler):
        result = reconcile(reconciler, pricing_mode=PricingMode.MANUAL_OVERRIDE, manual_gross_override=None)
        assert result.gross_total == Decimal("1285.35")
        assert result.pricing_mode == PricingMode.STANDARD

    def test_override_value_without_override_mode_is_ignored(self, reconciler):
        result = reconcile(reconciler, manual_gross_override=Decimal("500"))
        assert result.gross_total == Decimal("1285.35")


class TestNegotiated:

    def test_negotiated_price(self, reconciler):
        result = reconcile(reconciler, pricing_mode=PricingMode.NEGOTIATED, negotiated_price_value=Decimal("1000"))
        assert result.gross_total == Decimal("1000")
        assert quantize_money(result.net_total) == Decimal("813.01")
        assert quantize_money(result.vat_amount) == Decimal("186.99")
        assert result.effective_base == Decimal("1000")

    def test_unset_value_is_seeded_from_standard_gross(self, reconciler):
        result = reconcile(reconciler, pricing_mode=PricingMode.NEGOTIATED, negotiated_price_value=None)
        assert result.gross_total == Decimal("1285.35")
        assert quantize_money(result.net_total) == Decimal("1045.00")

    def test_negotiated_beats_manual_override(self, reconciler):
        result = reconcile(
            reconciler,
            pricing_mode=PricingMode.NEGOTIATED,
            negotiated_price_value=Decimal("1000"),
            manual_gross_override=Decimal("500"),
        )
        assert result.gross_total == Decimal("1000")


class TestReverseCharge:

    def test_base_is_net(self, reconciler):
        result = reconcile(reconciler, reverse_charge=True)
        assert result.effective_base == Decimal("1045")
        # The numbers themselves do not change
        assert result.gross_total == Decimal("1285.35")

    def test_base_is_back_computed_net_under_override(self, reconciler):
        result = reconcile(
            reconciler,
            pricing_mode=PricingMode.MANUAL_OVERRIDE,
            manual_gross_override=Decimal("1230"),
            reverse_charge=True,
        )
        assert result.effective_base == Decimal("1000")

    def test_negotiated_price_wins_over_reverse_charge(self, reconciler):
        """Both set: deposits use the negotiated gross."""
        result = reconcile(
            reconciler,
            pricing_mode=PricingMode.NEGOTIATED,
            negotiated_price_value=Decimal("1000"),
            reverse_charge=True,
        )
        assert result.effective_base == Decimal("1000")
        assert result.reverse_charge is True
