"""Day-split scheduler: spread long jobs evenly across days."""

import math

from ..errors import InvalidInput
from ..schemas import DaySplit
from ..tables import SINGLE_DAY_MAX_HOURS, LOCAL, REGIONAL, LONG_DISTANCE

_LIMIT_NAMES = {LOCAL: "local", REGIONAL: "regional", LONG_DISTANCE: "long distance"}


def split_days(total_hours: float, move_type: str) -> DaySplit:
    if total_hours < 0:
        raise InvalidInput(f"Total hours cannot be negative, got {total_hours}")
    limit = SINGLE_DAY_MAX_HOURS.get(move_type)
    if limit is None:
        raise InvalidInput(f"Unknown move type: {move_type}")
    name = _LIMIT_NAMES[move_type]

    if total_hours <= limit:
        return DaySplit(
            move_type=move_type,
            total_hours=total_hours,
            days=1,
            hours_per_day=total_hours,
            single_day_limit=limit,
            reasoning=f"Single day: {total_hours:g} hours ≤ {limit} hour {name} limit",
        )

    days = math.ceil(total_hours / limit)
    return DaySplit(
        move_type=move_type,
        total_hours=total_hours,
        days=days,
        hours_per_day=total_hours / days,
        single_day_limit=limit,
        reasoning=f"Split into {days} days: {total_hours:g} total hours > {limit} hour {name} limit",
    )
