"""
FACTURA-PE — Money helpers
Decimal conversion and the two rounding modes SUNAT amounts use.
"""

from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
HIGH_PRECISION = Decimal("0.0000000001")


def to_decimal(value, default: Decimal = ZERO) -> Decimal:
    """Convert str/int/float/Decimal/None to Decimal without float noise."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    """Round to 2 decimals, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_half_down(value) -> Decimal:
    """Round to 2 decimals, ties toward zero (unit price shown on the document)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_DOWN)


def precise(value) -> Decimal:
    """Keep 10 decimals, used for back-calculated unit values."""
    return to_decimal(value).quantize(HIGH_PRECISION, rounding=ROUND_HALF_UP)


def rate(porcentaje) -> Decimal:
    """18 -> 0.18"""
    return to_decimal(porcentaje) / HUNDRED


def format_amount(value) -> str:
    """Two-decimal string with thousands separator, e.g. 2,000.00"""
    return f"{money(value):,.2f}"
