"""Rounding helpers shared by the calculators."""

import math
from decimal import Decimal, ROUND_HALF_UP


def quarter_hour(hours: float) -> float:
    """Round UP to the next quarter hour. Billable time is never rounded down."""
    if hours <= 0:
        return 0.0
    # round() strips float noise such as 2.0000000000000004 before the ceiling
    return math.ceil(round(hours * 4, 9)) / 4


def money(amount: float) -> float:
    """Half-up rounding to cents, for output fields only."""
    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
