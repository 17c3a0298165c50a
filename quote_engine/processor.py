"""
Quote Processor - Main Orchestrator

Coordinates quote pricing through discrete, testable steps and exposes the
cached entry points used by interactive callers.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Sequence

from .cache import CalculationCache
from .calculators import (
    DepositAllocator,
    DiscountResolver,
    LineItemAggregator,
    PricingModeReconciler,
    default_deposits,
)
from .models import (
    CaseTotals,
    Deposit,
    DepositPlan,
    LineItem,
    QuoteCategory,
    QuoteContext,
    QuoteInputs,
    QuoteResult,
    QuoteTotals,
)
from .money import pricing_context, to_decimal
from .output import OutputBuilder
from .validators import InputValidator

logger = logging.getLogger(__name__)

CACHE_PREFIXES = {
    QuoteCategory.DOORS: "dvere:",
    QuoteCategory.FURNITURE: "nabytok:",
    QuoteCategory.STAIRS: "schody:",
    QuoteCategory.HARDWARE: "kovanie:",
    QuoteCategory.CASES: "puzdra:",
}
HOOK_PREFIX = "hook:"
DEPOSITS_PREFIX = "deposits:"


class QuoteProcessor:
    """
    Main orchestrator for quote pricing.

    Implements a clear pipeline pattern:
    1. Aggregate line items per category
    2. Resolve discounts
    3. Reconcile pricing mode (net / VAT / gross, effective base)
    4. Allocate deposits against the effective base

    Every entry point is memoized in the processor's cache. Pass an explicit
    CalculationCache to isolate processors from each other.
    """

    def __init__(self, cache: CalculationCache | None = None):
        self.cache = cache if cache is not None else CalculationCache()

        # Initialize all calculators
        self.validator = InputValidator()
        self.aggregator = LineItemAggregator()
        self.discount_resolver = DiscountResolver()
        self.reconciler = PricingModeReconciler()
        self.deposit_allocator = DepositAllocator()
        self.output_builder = OutputBuilder()

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def calculate_door_totals(self, inputs: QuoteInputs) -> QuoteTotals:
        """Totals for door quotes, where one row bundles door, frame, trim and blanks."""
        return self._cached_totals(QuoteCategory.DOORS, inputs)

    def calculate_furniture_totals(self, inputs: QuoteInputs) -> QuoteTotals:
        return self._cached_totals(QuoteCategory.FURNITURE, inputs)

    def calculate_stairs_totals(self, inputs: QuoteInputs) -> QuoteTotals:
        return self._cached_totals(QuoteCategory.STAIRS, inputs)

    def calculate_hardware_totals(self, inputs: QuoteInputs) -> QuoteTotals:
        return self._cached_totals(QuoteCategory.HARDWARE, inputs)

    def calculate_case_totals(self, items: Sequence[LineItem]) -> CaseTotals:
        """
        Totals for case quotes.

        Cases have no discounts, hardware, installation or overrides: the
        items are summed and VAT is added on top.
        """
        def compute() -> CaseTotals:
            with pricing_context():
                net = self.aggregator.aggregate(items)
                return CaseTotals(
                    net_total=net,
                    vat_amount=to_decimal(net * self.reconciler.VAT_RATE),
                    gross_total=to_decimal(net * self.reconciler.GROSS_FACTOR),
                )

        return self.cache.get_or_compute(CACHE_PREFIXES[QuoteCategory.CASES], list(items), compute)

    def calculate(self, category: QuoteCategory, inputs: QuoteInputs) -> QuoteTotals:
        """Dispatch to the entry point of a quote category."""
        if category == QuoteCategory.CASES:
            raise ValueError("Case quotes are priced with calculate_case_totals")
        return self._cached_totals(category, inputs)

    def memoized(self, calculate_fn: Callable[[], Any], deps: Sequence[Any]) -> Any:
        """
        Cache an arbitrary derived value under the same policy.

        The result is keyed on deps only, so deps must capture everything
        calculate_fn depends on.
        """
        return self.cache.get_or_compute(HOOK_PREFIX, list(deps), calculate_fn)

    def allocate_deposits(self, base: Decimal, deposits: Sequence[Deposit]) -> DepositPlan:
        """Split base across deposits (see DepositAllocator)."""
        def compute() -> DepositPlan:
            with pricing_context():
                return self.deposit_allocator.allocate(base, deposits)

        return self.cache.get_or_compute(
            DEPOSITS_PREFIX,
            {"base": base, "deposits": list(deposits)},
            compute,
        )

    def price_quote(
        self,
        category: QuoteCategory,
        inputs: QuoteInputs,
        deposits: Sequence[Deposit]
    ) -> QuoteResult:
        """Totals plus the deposit plan based on their effective base."""
        totals = self.calculate(category, inputs)
        plan = self.allocate_deposits(totals.effective_base, deposits)
        return QuoteResult(category=category, totals=totals, deposits=plan)

    def clear_cache(self) -> None:
        """Drop every cached result; the next call recomputes."""
        self.cache.clear()

    # =========================================================================
    # DICT / API
    # =========================================================================

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Price a quote from raw dictionary input.

        Convenience method for API usage.
        """
        self.validator.validate(data)

        category = QuoteCategory(data["category"])
        deposits = self._parse_deposits(data.get("deposits"))

        if category == QuoteCategory.CASES:
            items = [LineItem.from_dict(item, default_quantity=1) for item in data.get("items") or []]
            totals = self.calculate_case_totals(items)
            plan = self.allocate_deposits(totals.gross_total, deposits) if data.get("deposits") is not None else None
            return self.output_builder.build_case(totals, plan)

        inputs = QuoteInputs.from_dict(data["quote"], category)
        result = self.price_quote(category, inputs, deposits)
        return self.output_builder.build(result)

    def _parse_deposits(self, raw) -> list[Deposit]:
        if raw is None:
            return default_deposits()
        return [Deposit.from_dict(d) for d in raw]

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def _cached_totals(self, category: QuoteCategory, inputs: QuoteInputs) -> QuoteTotals:
        return self.cache.get_or_compute(
            CACHE_PREFIXES[category],
            inputs,
            lambda: self._compute_totals(inputs),
        )

    def _compute_totals(self, inputs: QuoteInputs) -> QuoteTotals:
        """Run the pricing pipeline for one quote."""
        with pricing_context():
            # Step 1: Build initial context
            ctx = QuoteContext(inputs=inputs)

            # Step 2: Aggregate line items
            ctx.subtotals = self.aggregator.calculate(ctx)

            # Step 3: Resolve discounts
            ctx.discount = self.discount_resolver.calculate(ctx)

            # Step 4: Reconcile pricing mode
            ctx.pricing = self.reconciler.calculate(ctx)

            return self._build_totals(ctx)

    def _build_totals(self, ctx: QuoteContext) -> QuoteTotals:
        """Assemble the totals; anything that overflowed is reported as 0."""
        subtotals = ctx.subtotals
        discount = ctx.discount
        pricing = ctx.pricing
        return QuoteTotals(
            products_total=subtotals.products_total,
            surcharges_total=subtotals.surcharges_total,
            subtotal=to_decimal(discount.subtotal),
            discount_amount=to_decimal(discount.discount_amount),
            after_discount=to_decimal(discount.after_discount),
            hardware_total=subtotals.hardware_total,
            installation_total=subtotals.installation_total,
            net_total=to_decimal(pricing.net_total),
            vat_amount=to_decimal(pricing.vat_amount),
            gross_total=to_decimal(pricing.gross_total),
            effective_base=to_decimal(pricing.effective_base),
            pricing_mode=pricing.pricing_mode,
            reverse_charge=pricing.reverse_charge,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_default_processor = QuoteProcessor()


def calculate_door_totals(inputs: QuoteInputs) -> QuoteTotals:
    return _default_processor.calculate_door_totals(inputs)


def calculate_furniture_totals(inputs: QuoteInputs) -> QuoteTotals:
    return _default_processor.calculate_furniture_totals(inputs)


def calculate_stairs_totals(inputs: QuoteInputs) -> QuoteTotals:
    return _default_processor.calculate_stairs_totals(inputs)


def calculate_hardware_totals(inputs: QuoteInputs) -> QuoteTotals:
    return _default_processor.calculate_hardware_totals(inputs)


def calculate_case_totals(items: Sequence[LineItem]) -> CaseTotals:
    return _default_processor.calculate_case_totals(items)


def memoized_calculation(calculate_fn: Callable[[], Any], deps: Sequence[Any]) -> Any:
    return _default_processor.memoized(calculate_fn, deps)


def clear_calculation_cache() -> None:
    """Empty the shared cache; the only way to guarantee fresh results."""
    _default_processor.clear_cache()


def process_quote_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Price a quote from Python dict and return Python dict.
    """
    return _default_processor.process_from_dict(input_data)


def process_quote_from_json(json_input: str) -> str:
    """
    Price a quote from JSON string input and return JSON string output.
    Never raises; errors are reported in the returned document.
    """
    try:
        input_data = json.loads(json_input)
        result = _default_processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        # json.JSONDecodeError is a ValueError too
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.error(f"Quote processing failed: {str(e)}", exc_info=True)
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
