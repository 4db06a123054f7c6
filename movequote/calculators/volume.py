"""
Volume & crew resolver.

Move size (or a custom/inventory volume) → cubic feet → base crew size.
"""

import math
from typing import Iterable, Optional

from ..errors import InvalidInput
from ..tables import (
    MOVE_SIZE_CUBIC_FEET, CREW_SIZE_BANDS, MIN_CREW_SIZE, MAX_CREW_SIZE,
    CUBIC_FEET_PER_TRUCK,
)


def cubic_feet_for(move_size: Optional[str] = None, custom_cubic_feet: Optional[float] = None) -> float:
    """Custom cubic feet wins over the move-size table when given."""
    if custom_cubic_feet is not None:
        if custom_cubic_feet <= 0:
            raise InvalidInput(f"Custom cubic feet must be greater than 0, got {custom_cubic_feet}")
        return float(custom_cubic_feet)

    if move_size is None:
        raise InvalidInput("Either a move size or custom cubic feet is required")
    if move_size not in MOVE_SIZE_CUBIC_FEET:
        raise InvalidInput(
            f"Unknown move size: {move_size}. "
            f"Available: {list(MOVE_SIZE_CUBIC_FEET.keys())}"
        )
    return float(MOVE_SIZE_CUBIC_FEET[move_size])


def inventory_cubic_feet(items: Iterable) -> float:
    """Sum of cubic_feet × quantity over an item inventory."""
    total = 0.0
    for item in items:
        if item.cubic_feet < 0 or item.quantity < 0:
            raise InvalidInput(f"Inventory item {item.name!r} has a negative size or quantity")
        total += item.cubic_feet * item.quantity
    return total


def base_crew_size(cubic_feet: float, forced_crew_size: Optional[int] = None) -> int:
    if cubic_feet <= 0:
        raise InvalidInput(f"Cubic feet must be greater than 0, got {cubic_feet}")

    if forced_crew_size is not None:
        if isinstance(forced_crew_size, bool) or not isinstance(forced_crew_size, int):
            raise InvalidInput(f"Forced crew size must be an integer, got {forced_crew_size!r}")
        if not MIN_CREW_SIZE <= forced_crew_size <= MAX_CREW_SIZE:
            raise InvalidInput(
                f"Forced crew size must be between {MIN_CREW_SIZE} and {MAX_CREW_SIZE}, "
                f"got {forced_crew_size}"
            )
        return forced_crew_size

    for max_cubic_feet, movers in CREW_SIZE_BANDS:
        if cubic_feet <= max_cubic_feet:
            return movers
    # Open-ended last band makes this unreachable with valid tables
    return CREW_SIZE_BANDS[-1][1]


def required_trucks(cubic_feet: float) -> int:
    """One truck per 1,600 cubic feet, at least one."""
    return max(1, math.ceil(cubic_feet / CUBIC_FEET_PER_TRUCK))
