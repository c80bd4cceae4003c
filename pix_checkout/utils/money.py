"""Money helpers for BRL amounts"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert int/str/float/Decimal to Decimal without binary float noise"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_brl(value: Decimal) -> Decimal:
    """Round to cents, half up"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Decimal) -> int:
    """Decimal reais to integer centavos"""
    return int(quantize_brl(value) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def format_brl(value: Decimal) -> str:
    """
    Format as Brazilian currency for display, e.g. R$ 1.234,56.

    Independent of the process locale.
    """
    amount = quantize_brl(value)
    sign = "-" if amount < 0 else ""
    integer, cents = f"{abs(amount):.2f}".split(".")
    groups = []
    while integer:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    return f"{sign}R$ {'.'.join(groups)},{cents}"
