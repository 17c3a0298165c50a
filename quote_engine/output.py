"""
Output Builder

Constructs the API response from pricing results.
"""

import math
from decimal import Decimal

from .models import CaseTotals, DepositPlan, PricingMode, QuoteResult, QuoteTotals
from .money import quantize_money


def _to_float(value: Decimal) -> float:
    result = float(value)
    return result if math.isfinite(result) else 0.0


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places (0.0 beyond float range)."""
    return _to_float(quantize_money(value))


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"{value:,.2f} €"


class OutputBuilder:
    """Builds the final output response."""

    def build(self, result: QuoteResult) -> dict:
        """Construct the complete response for a priced quote."""
        return {
            "category": result.category.value,
            "totals": self._build_totals(result.totals),
            "pricing": self._build_pricing(result.totals),
            "deposits": self.build_deposits(result.deposits),
        }

    def build_case(self, totals: CaseTotals, deposits: DepositPlan | None = None) -> dict:
        """Construct the response for a case quote (no discounts or overrides)."""
        net = to_money(totals.net_total)
        output = {
            "category": "cases",
            "totals": {
                "net_total": {
                    "value": net,
                    "description": "Sum of all case item prices"
                },
                "vat_amount": {
                    "value": to_money(totals.vat_amount),
                    "description": f"23% × {_fmt(net)} = {_fmt(to_money(totals.vat_amount))}"
                },
                "gross_total": {
                    "value": to_money(totals.gross_total),
                    "description": f"net ({_fmt(net)}) + VAT ({_fmt(to_money(totals.vat_amount))})"
                },
            },
        }
        if deposits is not None:
            output["deposits"] = self.build_deposits(deposits)
        return output

    def _build_totals(self, totals: QuoteTotals) -> dict:
        """Build totals section with value and dynamic description for each field."""
        products = to_money(totals.products_total)
        surcharges = to_money(totals.surcharges_total)
        subtotal = to_money(totals.subtotal)
        discount = to_money(totals.discount_amount)
        after_discount = to_money(totals.after_discount)
        hardware = to_money(totals.hardware_total)
        installation = to_money(totals.installation_total)
        net = to_money(totals.net_total)
        vat = to_money(totals.vat_amount)
        gross = to_money(totals.gross_total)

        if totals.pricing_mode == PricingMode.NEGOTIATED:
            gross_desc = f"Negotiated price {_fmt(gross)}, net and VAT back-computed"
        elif totals.pricing_mode == PricingMode.MANUAL_OVERRIDE:
            gross_desc = f"Manual gross override {_fmt(gross)}, net and VAT back-computed"
        else:
            gross_desc = f"net ({_fmt(net)}) × 1.23 = {_fmt(gross)}"

        return {
            "products_total": {
                "value": products,
                "description": "Sum of quantity × unit price over all product rows"
            },
            "surcharges_total": {
                "value": surcharges,
                "description": "Sum of quantity × unit price over all surcharges"
            },
            "subtotal": {
                "value": subtotal,
                "description": f"products ({_fmt(products)}) + surcharges ({_fmt(surcharges)}) = {_fmt(subtotal)}"
            },
            "discount_amount": {
                "value": discount,
                "description": f"Percentage and fixed discounts on {_fmt(subtotal)}" if totals.discount_amount else "No discount applied"
            },
            "after_discount": {
                "value": after_discount,
                "description": f"{_fmt(subtotal)} - {_fmt(discount)} = {_fmt(after_discount)}"
            },
            "hardware_total": {
                "value": hardware,
                "description": "Hardware items, not discounted"
            },
            "installation_total": {
                "value": installation,
                "description": "Installation items, not discounted"
            },
            "net_total": {
                "value": net,
                "description": f"after_discount ({_fmt(after_discount)}) + hardware ({_fmt(hardware)}) + installation ({_fmt(installation)})" if totals.pricing_mode == PricingMode.STANDARD else f"{_fmt(gross)} / 1.23 = {_fmt(net)}"
            },
            "vat_amount": {
                "value": vat,
                "description": f"23% VAT on {_fmt(net)}"
            },
            "gross_total": {
                "value": gross,
                "description": gross_desc
            },
        }

    def _build_pricing(self, totals: QuoteTotals) -> dict:
        """Build pricing mode section."""
        base_is_net = totals.reverse_charge and totals.pricing_mode != PricingMode.NEGOTIATED
        return {
            "pricing_mode": totals.pricing_mode.value,
            "reverse_charge": totals.reverse_charge,
            "effective_base": to_money(totals.effective_base),
            "effective_base_source": "net_total" if base_is_net else "gross_total",
        }

    def build_deposits(self, plan: DepositPlan) -> dict:
        """Build deposit plan section."""
        return {
            "base": to_money(plan.base),
            "rounded_default_split": plan.rounded_default_split,
            "total": to_money(plan.total),
            "items": [
                {
                    "id": allocation.deposit_id,
                    "label": allocation.label,
                    "percent": _to_float(allocation.percent),
                    "amount": to_money(allocation.amount),
                    "is_fixed": allocation.is_fixed,
                }
                for allocation in plan.allocations
            ],
        }
