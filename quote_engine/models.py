"""
Domain Models for the Quote Pricing Engine

These dataclasses provide type-safe representations of line items, quote
configuration, deposits and every calculation result.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .money import ZERO, pricing_context, to_decimal, to_optional_decimal


class PricingMode(str, Enum):
    """Mutually exclusive ways of arriving at the final gross price."""

    STANDARD = "standard"
    MANUAL_OVERRIDE = "manual_override"
    NEGOTIATED = "negotiated"


class QuoteCategory(str, Enum):
    """Quote families, each with its own entry point and cache prefix."""

    DOORS = "doors"
    FURNITURE = "furniture"
    STAIRS = "stairs"
    HARDWARE = "hardware"
    CASES = "cases"


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class LineItem:
    """A single priced row: quantity × unit price."""

    id: str | None
    quantity: Decimal
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        """Always recomputed; a stored total is never trusted."""
        return to_decimal(self.quantity) * to_decimal(self.unit_price)

    def priced_pairs(self) -> list[tuple[Decimal, Decimal]]:
        return [(self.quantity, self.unit_price)]

    @classmethod
    def from_dict(cls, data: dict, default_quantity=None) -> "LineItem":
        # Case items historically carry only a "price"
        return cls(
            id=data.get("id"),
            quantity=to_decimal(data.get("quantity", default_quantity)),
            unit_price=to_decimal(data.get("unit_price", data.get("price"))),
        )


@dataclass
class PricedPart:
    """One priced component of a bundled row."""

    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict | None) -> "PricedPart":
        if not data:
            return cls()
        return cls(
            quantity=to_decimal(data.get("quantity")),
            unit_price=to_decimal(data.get("unit_price")),
        )


@dataclass
class DoorRow:
    """A door product row bundling door, frame, trim and blank panels.

    Each part is priced independently and the row contributes all of them.
    """

    id: str | None
    door: PricedPart = field(default_factory=PricedPart)
    frame: PricedPart = field(default_factory=PricedPart)
    trim: PricedPart = field(default_factory=PricedPart)
    blank: PricedPart = field(default_factory=PricedPart)

    @property
    def line_total(self) -> Decimal:
        return sum(
            (to_decimal(quantity) * to_decimal(price) for quantity, price in self.priced_pairs()),
            ZERO,
        )

    def priced_pairs(self) -> list[tuple[Decimal, Decimal]]:
        return [
            (part.quantity, part.unit_price)
            for part in (self.door, self.frame, self.trim, self.blank)
        ]

    @classmethod
    def from_dict(cls, data: dict) -> "DoorRow":
        return cls(
            id=data.get("id"),
            door=PricedPart.from_dict(data.get("door")),
            frame=PricedPart.from_dict(data.get("frame")),
            trim=PricedPart.from_dict(data.get("trim")),
            blank=PricedPart.from_dict(data.get("blank")),
        )


@dataclass
class QuoteInputs:
    """Everything needed to price one quote."""

    products: list = field(default_factory=list)  # LineItem, or DoorRow for doors
    surcharges: list[LineItem] = field(default_factory=list)
    hardware: list[LineItem] = field(default_factory=list)
    installation: list[LineItem] = field(default_factory=list)
    discount_percent: Decimal = ZERO
    discount_percent_enabled: bool = True
    discount_fixed: Decimal = ZERO
    discount_fixed_enabled: bool = False
    pricing_mode: PricingMode = PricingMode.STANDARD
    manual_gross_override: Decimal | None = None
    negotiated_price_value: Decimal | None = None
    reverse_charge: bool = False

    @classmethod
    def from_dict(cls, data: dict, category: QuoteCategory = QuoteCategory.FURNITURE) -> "QuoteInputs":
        if category == QuoteCategory.DOORS:
            products = [DoorRow.from_dict(row) for row in data.get("products") or []]
        else:
            products = [LineItem.from_dict(item) for item in data.get("products") or []]

        manual_override = to_optional_decimal(data.get("manual_gross_override"))
        return cls(
            products=products,
            surcharges=[LineItem.from_dict(item) for item in data.get("surcharges") or []],
            hardware=[LineItem.from_dict(item) for item in data.get("hardware") or []],
            installation=[LineItem.from_dict(item) for item in data.get("installation") or []],
            discount_percent=to_decimal(data.get("discount_percent")),
            # Percentage discount is on unless explicitly switched off
            discount_percent_enabled=data.get("discount_percent_enabled") is not False,
            discount_fixed=to_decimal(data.get("discount_fixed")),
            discount_fixed_enabled=bool(data.get("discount_fixed_enabled", False)),
            pricing_mode=cls._resolve_pricing_mode(data, manual_override),
            manual_gross_override=manual_override,
            negotiated_price_value=to_optional_decimal(data.get("negotiated_price_value")),
            reverse_charge=bool(data.get("reverse_charge", data.get("reverse_charge_enabled", False))),
        )

    @staticmethod
    def _resolve_pricing_mode(data: dict, manual_override: Decimal | None) -> PricingMode:
        """Fold the legacy per-mode flags into a single mode.

        An explicit "pricing_mode" wins. Otherwise: negotiated price, then a
        present manual gross override, then standard.
        """
        if data.get("pricing_mode"):
            return PricingMode(data["pricing_mode"])
        if data.get("negotiated_price_enabled"):
            return PricingMode.NEGOTIATED
        if manual_override is not None:
            return PricingMode.MANUAL_OVERRIDE
        return PricingMode.STANDARD


@dataclass
class Deposit:
    """One installment of the payment plan."""

    id: str
    label: str
    percent: Decimal
    fixed_amount: Decimal | None = None  # authoritative when set

    @classmethod
    def from_dict(cls, data: dict) -> "Deposit":
        # Support both 'fixed_amount' and legacy 'amount'
        return cls(
            id=str(data["id"]),
            label=data.get("label") or "",
            percent=to_decimal(data.get("percent")),
            fixed_amount=to_optional_decimal(data.get("fixed_amount", data.get("amount"))),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class CategorySubtotals:
    """Results of line-item aggregation."""

    products_total: Decimal = ZERO
    surcharges_total: Decimal = ZERO
    hardware_total: Decimal = ZERO
    installation_total: Decimal = ZERO


@dataclass(frozen=True)
class DiscountCalculation:
    """Results of the discount step."""

    subtotal: Decimal = ZERO
    percent_amount: Decimal = ZERO
    fixed_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    after_discount: Decimal = ZERO


@dataclass(frozen=True)
class PricingResolution:
    """Authoritative net/VAT/gross after pricing mode precedence."""

    net_standard: Decimal = ZERO
    net_total: Decimal = ZERO
    vat_amount: Decimal = ZERO
    gross_total: Decimal = ZERO
    effective_base: Decimal = ZERO
    pricing_mode: PricingMode = PricingMode.STANDARD
    reverse_charge: bool = False


@dataclass(frozen=True)
class QuoteTotals:
    """Final totals of a quote. Derived only, never persisted."""

    products_total: Decimal
    surcharges_total: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    after_discount: Decimal
    hardware_total: Decimal
    installation_total: Decimal
    net_total: Decimal
    vat_amount: Decimal
    gross_total: Decimal
    effective_base: Decimal
    pricing_mode: PricingMode = PricingMode.STANDARD
    reverse_charge: bool = False


@dataclass(frozen=True)
class CaseTotals:
    """Reduced totals for quotes without discounts or overrides."""

    net_total: Decimal
    vat_amount: Decimal
    gross_total: Decimal


@dataclass(frozen=True)
class DepositAllocation:
    """Displayed amount for one deposit."""

    deposit_id: str
    label: str
    percent: Decimal
    amount: Decimal
    is_fixed: bool = False


@dataclass(frozen=True)
class DepositPlan:
    """Allocation of a base total across the deposit schedule."""

    base: Decimal
    allocations: tuple[DepositAllocation, ...] = ()
    rounded_default_split: bool = False

    @property
    def total(self) -> Decimal:
        """Sum of displayed amounts; equals base only for the rounded default split."""
        with pricing_context():
            return to_decimal(sum((allocation.amount for allocation in self.allocations), ZERO))


@dataclass
class QuoteContext:
    """
    Holds all intermediate state while a quote is priced.
    This is the "bag" that flows through the pipeline.
    """

    inputs: QuoteInputs

    subtotals: CategorySubtotals = field(default_factory=CategorySubtotals)
    discount: DiscountCalculation = field(default_factory=DiscountCalculation)
    pricing: PricingResolution = field(default_factory=PricingResolution)


@dataclass(frozen=True)
class QuoteResult:
    """Totals plus the deposit plan computed against their effective base."""

    category: QuoteCategory
    totals: QuoteTotals
    deposits: DepositPlan
