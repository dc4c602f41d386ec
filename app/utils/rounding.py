"""Decimal rounding with ties away from zero."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to `places` decimals, resolving exact ties upward.

    The built-in round() goes to the even neighbour, so round(8.125, 2)
    is 8.12; this returns 8.13.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
