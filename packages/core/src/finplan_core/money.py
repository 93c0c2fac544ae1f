"""Decimal helpers shared by the calculation engines.

All monetary values are carried as ``Decimal`` in major currency units
(dollars, not cents). Intermediate values stay unrounded; only results are
rounded to the cent, half-up.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def to_decimal(value: Number) -> Decimal:
    """Coerce a numeric input to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_cents(value: Number) -> Decimal:
    """Round to the nearest cent, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_to_monthly_rate(annual_rate_pct: Number) -> Decimal:
    """Convert an annual percentage rate (e.g. ``4.5``) to a monthly fraction."""
    return to_decimal(annual_rate_pct) / HUNDRED / MONTHS_PER_YEAR
