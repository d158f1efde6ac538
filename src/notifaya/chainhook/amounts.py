"""microSTX ↔ STX conversion using exact decimal arithmetic."""

from __future__ import annotations

from decimal import Decimal

MICRO_PER_STX = 1_000_000
MICRO_EXPONENT = -6

# Clarity amounts are u128
MAX_AMOUNT_MICRO = 2**128 - 1


def micro_to_stx(amount_micro: int) -> Decimal:
    """Convert an integer microSTX amount to STX without rounding.

    The result is built by shifting the exponent, so it does not depend on
    the precision of the active decimal context.
    """
    sign, digits, exponent = Decimal(amount_micro).as_tuple()
    return Decimal((sign, digits, exponent + MICRO_EXPONENT))


def format_stx(amount_micro: int) -> str:
    """Render a microSTX amount in STX with no trailing zeros.

    >>> format_stx(5_000_000)
    '5'
    >>> format_stx(1_500_000)
    '1.5'
    """
    value = micro_to_stx(amount_micro)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
