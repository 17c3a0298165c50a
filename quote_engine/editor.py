"""
Quote Editor

Editing rules around the deposit allocator. A fixed deposit amount is only
meaningful against the base it was typed in for, so:

- setting a deposit's percent drops that deposit's fixed amount;
- adding or removing a deposit drops every fixed amount;
- any edit that changes the effective base drops every fixed amount;
- switching a discount, reverse charge or the negotiated price on or off
  always does, even when the base stays the same.

The functions below never mutate their input and return new lists.
"""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Sequence

from .calculators import default_deposits
from .models import (
    Deposit,
    DepositPlan,
    PricingMode,
    QuoteCategory,
    QuoteInputs,
    QuoteResult,
    QuoteTotals,
)
from .money import ZERO, to_decimal, to_optional_decimal
from .processor import QuoteProcessor
from .validators import LINE_ITEM_SECTIONS

logger = logging.getLogger(__name__)


# =============================================================================
# DEPOSIT SCHEDULE TRANSITIONS
# =============================================================================


def _require(deposits: Sequence[Deposit], deposit_id: str) -> None:
    if not any(d.id == deposit_id for d in deposits):
        raise ValueError(f"Unknown deposit id: {deposit_id}")


def set_deposit_percent(deposits: Sequence[Deposit], deposit_id: str, percent) -> list[Deposit]:
    """Change a deposit's percent; it goes back to percentage-based allocation."""
    _require(deposits, deposit_id)
    return [
        replace(d, percent=to_decimal(percent), fixed_amount=None) if d.id == deposit_id else d
        for d in deposits
    ]


def set_deposit_amount(deposits: Sequence[Deposit], deposit_id: str, amount) -> list[Deposit]:
    """Pin a deposit to a fixed amount (None unpins it)."""
    _require(deposits, deposit_id)
    return [
        replace(d, fixed_amount=to_optional_decimal(amount)) if d.id == deposit_id else d
        for d in deposits
    ]


def clear_fixed_amounts(deposits: Iterable[Deposit]) -> list[Deposit]:
    return [replace(d, fixed_amount=None) for d in deposits]


def add_deposit(
    deposits: Sequence[Deposit],
    label: str = "",
    percent=ZERO,
    deposit_id: str | None = None
) -> list[Deposit]:
    """Append a deposit. Every fixed amount is dropped."""
    new_id = deposit_id if deposit_id is not None else uuid.uuid4().hex
    if any(d.id == new_id for d in deposits):
        raise ValueError(f"Duplicate deposit id: {new_id}")
    new_deposit = Deposit(id=new_id, label=label, percent=to_decimal(percent))
    return clear_fixed_amounts(deposits) + [new_deposit]


def remove_deposit(deposits: Sequence[Deposit], deposit_id: str) -> list[Deposit]:
    """Remove a deposit. Every fixed amount is dropped."""
    _require(deposits, deposit_id)
    return clear_fixed_amounts(d for d in deposits if d.id != deposit_id)


# =============================================================================
# EDITOR
# =============================================================================


class QuoteEditor:
    """
    Editing state of one quote: its inputs and its deposit schedule.

    Each edit replaces self.inputs / self.deposits with new objects and then
    applies the reset rules above, so the deposit plan never carries fixed
    amounts computed against a stale base.
    """

    def __init__(
        self,
        category: QuoteCategory,
        inputs: QuoteInputs | None = None,
        deposits: Sequence[Deposit] | None = None,
        processor: QuoteProcessor | None = None
    ):
        if category == QuoteCategory.CASES:
            raise ValueError("Case quotes have no pricing modes or deposits to edit")
        self.category = category
        self.inputs = inputs if inputs is not None else QuoteInputs()
        self.deposits = list(deposits) if deposits is not None else default_deposits()
        self.processor = processor if processor is not None else QuoteProcessor()

    # Reading ---------------------------------------------------------------

    def totals(self) -> QuoteTotals:
        return self.processor.calculate(self.category, self.inputs)

    def deposit_plan(self) -> DepositPlan:
        return self.processor.allocate_deposits(self.totals().effective_base, self.deposits)

    def result(self) -> QuoteResult:
        return self.processor.price_quote(self.category, self.inputs, self.deposits)

    # Line items and discounts ---------------------------------------------

    def set_line_items(self, section: str, items: Iterable) -> None:
        """
        Replace one line-item section.

        A manual gross override was typed against the old items, so it is
        dropped and the quote goes back to standard pricing.
        """
        if section not in LINE_ITEM_SECTIONS:
            raise ValueError(f"Invalid section: {section}. Must be one of {list(LINE_ITEM_SECTIONS)}")

        changes = {section: list(items)}
        if self.inputs.pricing_mode == PricingMode.MANUAL_OVERRIDE:
            changes.update(pricing_mode=PricingMode.STANDARD, manual_gross_override=None)
        self._apply(replace(self.inputs, **changes))

    def set_discount_percent(self, percent) -> None:
        self._apply(replace(self.inputs, discount_percent=to_decimal(percent)))

    def set_discount_percent_enabled(self, enabled: bool) -> None:
        changed = enabled != self.inputs.discount_percent_enabled
        self._apply(replace(self.inputs, discount_percent_enabled=enabled), force_reset=changed)

    def set_discount_fixed(self, amount) -> None:
        self._apply(replace(self.inputs, discount_fixed=to_decimal(amount)))

    def set_discount_fixed_enabled(self, enabled: bool) -> None:
        changed = enabled != self.inputs.discount_fixed_enabled
        self._apply(replace(self.inputs, discount_fixed_enabled=enabled), force_reset=changed)

    # Pricing modes ---------------------------------------------------------

    def set_reverse_charge(self, enabled: bool) -> None:
        """Reverse charge and negotiated price exclude each other."""
        changed = enabled != self.inputs.reverse_charge
        changes = {"reverse_charge": enabled}
        if enabled and self.inputs.pricing_mode == PricingMode.NEGOTIATED:
            changes["pricing_mode"] = self._mode_without_negotiation()
        self._apply(replace(self.inputs, **changes), force_reset=changed)

    def set_negotiated_price(self, enabled: bool, value=None) -> None:
        """
        Switch the negotiated price on or off.

        While no value is set the negotiated gross is seeded from the
        standard gross.
        """
        changed = enabled != (self.inputs.pricing_mode == PricingMode.NEGOTIATED)
        if enabled:
            changes = {
                "pricing_mode": PricingMode.NEGOTIATED,
                "reverse_charge": False,
            }
            if value is not None:
                changes["negotiated_price_value"] = to_optional_decimal(value)
        else:
            changes = {"pricing_mode": self._mode_without_negotiation()}
        self._apply(replace(self.inputs, **changes), force_reset=changed)

    def set_negotiated_price_value(self, value) -> None:
        self._apply(replace(self.inputs, negotiated_price_value=to_optional_decimal(value)))

    def set_manual_gross_override(self, value) -> None:
        """Set (or with None, clear) the manual gross override."""
        gross = to_optional_decimal(value)
        changes = {"manual_gross_override": gross}
        if self.inputs.pricing_mode != PricingMode.NEGOTIATED:
            changes["pricing_mode"] = PricingMode.STANDARD if gross is None else PricingMode.MANUAL_OVERRIDE
        self._apply(replace(self.inputs, **changes))

    # Deposits --------------------------------------------------------------

    def set_deposit_percent(self, deposit_id: str, percent) -> None:
        self.deposits = set_deposit_percent(self.deposits, deposit_id, percent)

    def set_deposit_amount(self, deposit_id: str, amount) -> None:
        self.deposits = set_deposit_amount(self.deposits, deposit_id, amount)

    def add_deposit(self, label: str = "", percent=ZERO, deposit_id: str | None = None) -> Deposit:
        self.deposits = add_deposit(self.deposits, label, percent, deposit_id)
        return self.deposits[-1]

    def remove_deposit(self, deposit_id: str) -> None:
        self.deposits = remove_deposit(self.deposits, deposit_id)

    # Internals -------------------------------------------------------------

    def _mode_without_negotiation(self) -> PricingMode:
        if self.inputs.manual_gross_override is not None:
            return PricingMode.MANUAL_OVERRIDE
        return PricingMode.STANDARD

    def _apply(self, new_inputs: QuoteInputs, force_reset: bool = False) -> None:
        old_base: Decimal = self.totals().effective_base
        self.inputs = new_inputs
        new_base = self.totals().effective_base

        if force_reset or new_base != old_base:
            if any(d.fixed_amount is not None for d in self.deposits):
                logger.debug(f"Effective base {old_base} -> {new_base}, clearing fixed deposit amounts")
            self.deposits = clear_fixed_amounts(self.deposits)
