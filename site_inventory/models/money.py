"""Lenient numeric coercion for money and count fields."""

from decimal import Decimal, InvalidOperation
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0")

# Largest magnitude accepted for an amount; beyond it cents no longer fit
# the default decimal context.
MAX_AMOUNT = Decimal("1e15")
# Largest floor or flats-per-floor count a layout may ask for.
MAX_COUNT = 999


def parse_amount(value: Any) -> Decimal | None:
    """Parse a user-entered amount.

    Returns ``None`` for missing, blank, non-numeric, non-finite or
    out-of-range input so callers can tell "absent" apart from an explicit
    zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
        return None
    return amount


def to_amount(value: Any) -> Decimal:
    """Coerce a stored amount, treating anything unparsable as zero."""
    amount = parse_amount(value)
    return ZERO if amount is None else amount


def quantize(amount: Decimal) -> Decimal:
    """Round an amount to cents."""
    return amount.quantize(CENTS)


def to_count(value: Any) -> int:
    """Coerce a floor/flat count, treating anything unparsable as zero.

    Fractional counts are truncated, negative counts clamp to zero and
    counts above ``MAX_COUNT`` are treated as unparsable.
    """
    amount = parse_amount(value)
    if amount is None or amount > MAX_COUNT:
        return 0
    return max(0, int(amount))
