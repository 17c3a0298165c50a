"""
Money helpers for the Quote Pricing Engine

Raw numbers come straight from interactive forms, so every conversion here is
lenient: anything that is not a finite number becomes zero.
"""

from contextlib import contextmanager
from decimal import (
    ROUND_CEILING,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    localcontext,
)

ZERO = Decimal("0")
TEN = Decimal("10")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

# Overflow and invalid results become Infinity / NaN instead of raising, and
# are coerced to zero where totals are assembled.
PRICING_CONTEXT = Context(traps=[DivisionByZero])

# Enough digits to keep cents on anything a float can still represent.
QUANTIZE_CONTEXT = Context(prec=400, traps=[DivisionByZero])


@contextmanager
def pricing_context():
    """Run pricing arithmetic without Overflow / InvalidOperation traps."""
    with localcontext(PRICING_CONTEXT):
        yield


def to_decimal(value) -> Decimal:
    """Coerce a raw numeric field to Decimal (missing, invalid or non-finite -> 0)."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def to_optional_decimal(value) -> Decimal | None:
    """Like to_decimal, but an absent value (None or an emptied field) stays unset."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_decimal(value)


def quantize_money(value: Decimal) -> Decimal:
    """
    Round to 2 decimal places, half up.

    Non-finite values become zero. A value too large to carry cents is
    returned unrounded.
    """
    value = to_decimal(value)
    result = value.quantize(CENT, rounding=ROUND_HALF_UP, context=QUANTIZE_CONTEXT)
    return result if result.is_finite() else value


def round_up_to_ten(value: Decimal) -> Decimal:
    """Ceiling to the nearest multiple of 10 (e.g. 771.21 -> 780)."""
    return (value / TEN).to_integral_value(rounding=ROUND_CEILING) * TEN
