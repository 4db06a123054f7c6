"""
Handicap (accessibility) modifier and handicap-driven crew escalation.

Stairs, long carries and elevators at either end stretch moving time. Past
the banded thresholds they also add movers. Small jobs (< 400 cuft) ignore
handicaps entirely.
"""

import logging
import math
from typing import Optional

from ..errors import InvalidInput
from ..schemas import CrewAdjustment, HandicapFactors, HandicapResult
from ..tables import (
    HANDICAP_CUBIC_FEET_THRESHOLD, STAIRS_PER_FLIGHT, WALK_PER_100_FEET,
    ELEVATOR_PENALTY, CREW_ADJUSTMENT_BANDS, MAX_CREW_SIZE,
)

logger = logging.getLogger(__name__)


def _pct(value: float) -> str:
    return f"{value * 100:g}%"


def location_percent(factors: Optional[HandicapFactors]) -> float:
    """Handicap share for one address, e.g. 0.27 for 3 flights of stairs."""
    if factors is None:
        return 0.0
    walk_units = math.floor(factors.walk_feet / 100)
    percent = (
        factors.stairs * STAIRS_PER_FLIGHT
        + walk_units * WALK_PER_100_FEET
        + (ELEVATOR_PENALTY if factors.elevator else 0.0)
    )
    # 3 × 0.09 must compare equal to the 0.27 threshold
    return round(percent, 6)


def _has_factors(factors: Optional[HandicapFactors]) -> bool:
    return factors is not None and bool(factors.stairs or factors.walk_feet or factors.elevator)


def accessibility_modifier(cubic_feet: float, origin: Optional[HandicapFactors],
                           destination: Optional[HandicapFactors] = None) -> HandicapResult:
    origin_percent = location_percent(origin)
    destination_percent = location_percent(destination)

    if cubic_feet < HANDICAP_CUBIC_FEET_THRESHOLD:
        warnings = []
        if _has_factors(origin) or _has_factors(destination):
            warnings.append(
                f"Handicap factors ignored: cubic feet ({cubic_feet:g}) "
                f"below threshold ({HANDICAP_CUBIC_FEET_THRESHOLD})"
            )
        return HandicapResult(
            modifier=1.0,
            origin_percent=origin_percent,
            destination_percent=destination_percent,
            applied=False,
            warnings=warnings,
        )

    return HandicapResult(
        modifier=round(1.0 + origin_percent + destination_percent, 6),
        origin_percent=origin_percent,
        destination_percent=destination_percent,
        applied=True,
    )


def _band_for(cubic_feet: float):
    for lower, upper, first, second, label in CREW_ADJUSTMENT_BANDS:
        if lower <= cubic_feet < upper:
            return first, second, label
    raise InvalidInput(f"No crew adjustment band covers {cubic_feet} cubic feet")


def adjust_crew(cubic_feet: float, base_crew: int, modifier: float, forced: bool = False) -> CrewAdjustment:
    """Add 0, 1 or 2 movers depending on how far the handicap crosses its band thresholds."""
    if forced:
        return CrewAdjustment(
            base_crew=base_crew,
            adjusted_crew=base_crew,
            movers_added=0,
            reasoning="No adjustment: crew size set manually",
        )
    if cubic_feet < HANDICAP_CUBIC_FEET_THRESHOLD:
        return CrewAdjustment(
            base_crew=base_crew,
            adjusted_crew=base_crew,
            movers_added=0,
            reasoning=(
                f"No adjustment: cubic feet ({cubic_feet:g}) "
                f"below handicap threshold ({HANDICAP_CUBIC_FEET_THRESHOLD})"
            ),
        )

    first, second, label = _band_for(cubic_feet)
    handicap = round(modifier - 1.0, 6)

    if handicap >= second:
        wanted, threshold = 2, second
    elif handicap >= first:
        wanted, threshold = 1, first
    else:
        return CrewAdjustment(
            base_crew=base_crew,
            adjusted_crew=base_crew,
            movers_added=0,
            band=label,
            reasoning=f"No adjustment: handicap {_pct(handicap)} below {_pct(first)} threshold ({label} range)",
        )

    adjusted = max(base_crew, min(base_crew + wanted, MAX_CREW_SIZE))
    added = adjusted - base_crew
    noun = "mover" if wanted == 1 else "movers"
    reasoning = f"Added {wanted} {noun}: handicap {_pct(handicap)} >= {_pct(threshold)} threshold ({label} range)"
    if added < wanted:
        reasoning += f", capped at {MAX_CREW_SIZE}"
        logger.info("Crew escalation capped at %d (wanted +%d from %d)", MAX_CREW_SIZE, wanted, base_crew)

    return CrewAdjustment(
        base_crew=base_crew,
        adjusted_crew=adjusted,
        movers_added=added,
        band=label,
        reasoning=reasoning,
    )
