"""Fixed-point helpers for every monetary computation.

All arithmetic goes through ``DECIMAL_CONTEXT``, whose precision comfortably
exceeds the 78 digits of a uint256, so shifting on-chain integers never
rounds.
"""

from __future__ import annotations

from decimal import (
    ROUND_DOWN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)

from .constants import STATUS_MAX_LENGTH, TOKEN_DECIMALS

DECIMAL_CONTEXT = Context(
    prec=100,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

ONE = Decimal(1)
HUNDRED = Decimal(100)


def to_decimal(value: int | str | float | Decimal) -> Decimal:
    """Convert a feed or contract value to Decimal without float rounding.

    Floats are routed through ``str`` so ``0.1`` stays ``0.1``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not amounts")
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value).strip())


def shift(value: int | str | Decimal, places: int) -> Decimal:
    """Move the decimal point of ``value`` by ``places`` (negative = left)."""
    return DECIMAL_CONTEXT.scaleb(to_decimal(value), places)


def from_base_units(value: int | str | Decimal, decimals: int = TOKEN_DECIMALS) -> Decimal:
    """Convert an on-chain integer amount into human units.

    Args:
        value: Amount in base units (e.g. wei).
        decimals: Token decimals, 18 for every TETU ecosystem token.

    Returns:
        The exact human-unit amount.
    """
    return shift(value, -decimals)


def to_base_units(value: int | str | Decimal, decimals: int = TOKEN_DECIMALS) -> int:
    """Convert a human-unit amount into base units, truncating dust below 1 wei."""
    scaled = shift(value, decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN, context=DECIMAL_CONTEXT))


def discount_ratio(quoted_out: Decimal) -> Decimal:
    """Shortfall from 1:1 parity for a 1-unit quote expressed in human units."""
    return DECIMAL_CONTEXT.subtract(ONE, quoted_out)


def format_percent(ratio: Decimal, places: int = 1) -> str:
    """Render a ratio as a percentage, truncating (not rounding) to ``places``.

    ``Decimal("0.0567")`` becomes ``"5.6%"``.
    """
    pct = DECIMAL_CONTEXT.multiply(ratio, HUNDRED)
    truncated = pct.quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_DOWN, context=DECIMAL_CONTEXT
    )
    if truncated.is_zero():
        truncated = abs(truncated)
    return f"{truncated}%"


def format_change(value: Decimal, places: int = 2) -> str:
    """Render a percentage change with an explicit sign, e.g. ``+1.25%``."""
    rounded = value.quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT
    )
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:+.{places}f}%"


def format_currency(value: Decimal, places: int = 2) -> str:
    """Render an amount with thousands separators and ``places`` decimals."""
    rounded = value.quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=DECIMAL_CONTEXT
    )
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:,.{places}f}"


def truncate_status(text: str, limit: int = STATUS_MAX_LENGTH) -> str:
    """Hard-truncate a display string to what the status display accepts."""
    return text[:limit]
