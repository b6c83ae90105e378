"""Decimal money helpers.

Amounts stay Decimal from the data source boundary to the response; floats
only appear when a transformer renders JSON.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

ZERO = Decimal("0")


def coerce_decimal(value: Any) -> Any:
    """Convert floats through their string form so 1.2 stays Decimal('1.2')."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def round_currency(value: Decimal, decimals: int = 0) -> Decimal:
    """Round half-up to the given number of currency decimals.

    Args:
        value: Amount to round
        decimals: Fractional digits kept (0 for whole currency units)

    Returns:
        Rounded amount
    """
    quantum = Decimal(1).scaleb(-decimals)
    return value.quantize(quantum, rounding=ROUND_HALF_UP)
