"""
Pricing Mode Reconciler

Turns the discounted subtotal plus hardware and installation into the
authoritative net / VAT / gross triple.
"""

from decimal import Decimal

from ..models import PricingMode, PricingResolution, QuoteContext
from ..money import to_decimal


class PricingModeReconciler:
    """Resolves which total is authoritative for the active pricing mode."""

    VAT_RATE = Decimal('0.23')
    GROSS_FACTOR = Decimal('1.23')

    def calculate(self, ctx: QuoteContext) -> PricingResolution:
        inputs = ctx.inputs
        return self.reconcile(
            after_discount=ctx.discount.after_discount,
            hardware_total=ctx.subtotals.hardware_total,
            installation_total=ctx.subtotals.installation_total,
            pricing_mode=inputs.pricing_mode,
            manual_gross_override=inputs.manual_gross_override,
            negotiated_price_value=inputs.negotiated_price_value,
            reverse_charge=inputs.reverse_charge,
        )

    def reconcile(
        self,
        after_discount: Decimal,
        hardware_total: Decimal,
        installation_total: Decimal,
        pricing_mode: PricingMode = PricingMode.STANDARD,
        manual_gross_override: Decimal | None = None,
        negotiated_price_value: Decimal | None = None,
        reverse_charge: bool = False
    ) -> PricingResolution:
        """
        Resolve net, VAT and gross.

        Priority order:
        1. Negotiated price (gross fixed, seeded from the standard gross while unset)
        2. Manual gross override (when a value is present)
        3. Standard computation

        Reverse charge never changes these numbers, it only moves the deposit
        base to the net total. A negotiated price is already the agreed gross,
        so it stays the base even with reverse charge on.
        """
        net_standard = to_decimal(after_discount) + to_decimal(hardware_total) + to_decimal(installation_total)

        if pricing_mode == PricingMode.NEGOTIATED:
            if negotiated_price_value is None:
                gross = net_standard * self.GROSS_FACTOR
            else:
                gross = to_decimal(negotiated_price_value)
            net, vat = self.split_gross(gross)
        elif pricing_mode == PricingMode.MANUAL_OVERRIDE and manual_gross_override is not None:
            gross = to_decimal(manual_gross_override)
            net, vat = self.split_gross(gross)
        else:
            # An override mode without a value prices as standard
            pricing_mode = PricingMode.STANDARD
            net = net_standard
            vat = net_standard * self.VAT_RATE
            gross = net_standard * self.GROSS_FACTOR

        if reverse_charge and pricing_mode != PricingMode.NEGOTIATED:
            effective_base = net
        else:
            effective_base = gross

        return PricingResolution(
            net_standard=net_standard,
            net_total=net,
            vat_amount=vat,
            gross_total=gross,
            effective_base=effective_base,
            pricing_mode=pricing_mode,
            reverse_charge=reverse_charge,
        )

    def split_gross(self, gross: Decimal) -> tuple[Decimal, Decimal]:
        """Back-compute (net, vat) from a gross amount."""
        net = gross / self.GROSS_FACTOR
        return net, gross - net
