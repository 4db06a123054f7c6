"""
Time estimator.

Packing/unpacking time from box counts, moving time from cubic feet, and the
billed base time per service type with the 2-hour minimum.

Every billable hour figure is rounded UP to the quarter hour. The per-box
minute breakdowns are for display and stay unrounded.
"""

from typing import Dict

from ..errors import InvalidInput, InvalidServiceType
from ..rounding import quarter_hour
from ..schemas import ServiceTime, WorkTime
from ..tables import (
    BOX_TYPES, PACKING_MINUTES, UNPACKING_MINUTES,
    PACKING_ROOM_PENALTY_MINUTES, UNPACKING_ROOM_PENALTY_MINUTES,
    WHITE_GLOVE_TIME_MODIFIER, SERVICE_TIER_SPEED, SERVICE_COMPONENTS,
    MOVING_TIME_SCALE, MINIMUM_BILLABLE_HOURS, HANDICAP_CUBIC_FEET_THRESHOLD,
    MOVING, PACKING, UNPACKING,
)


def _work_time(boxes: Dict[str, int], room_count: int, workers: int, minutes_table: dict,
               room_penalty: float, white_glove: bool) -> WorkTime:
    if workers < 1:
        raise InvalidInput(f"Worker count must be at least 1, got {workers}")

    per_box = {
        box_type: boxes.get(box_type, 0) * minutes_table[box_type] / workers
        for box_type in BOX_TYPES
    }
    room_penalty_minutes = room_count * room_penalty / workers
    subtotal = sum(per_box.values()) + room_penalty_minutes
    white_glove_minutes = subtotal * WHITE_GLOVE_TIME_MODIFIER if white_glove else 0.0
    total_minutes = subtotal + white_glove_minutes

    return WorkTime(
        workers=workers,
        per_box_minutes=per_box,
        room_penalty_minutes=room_penalty_minutes,
        white_glove_minutes=white_glove_minutes,
        total_minutes=total_minutes,
        total_hours=quarter_hour(total_minutes / 60),
    )


def packing_time(boxes: Dict[str, int], room_count: int, workers: int, white_glove: bool = False) -> WorkTime:
    return _work_time(boxes, room_count, workers, PACKING_MINUTES, PACKING_ROOM_PENALTY_MINUTES, white_glove)


def unpacking_time(boxes: Dict[str, int], room_count: int, workers: int, white_glove: bool = False) -> WorkTime:
    return _work_time(boxes, room_count, workers, UNPACKING_MINUTES, UNPACKING_ROOM_PENALTY_MINUTES, white_glove)


def service_components(service_type: str) -> tuple:
    components = SERVICE_COMPONENTS.get(service_type)
    if components is None:
        raise InvalidServiceType(
            f"Unknown service type: {service_type}. "
            f"Available: {list(SERVICE_COMPONENTS.keys())}"
        )
    return components


def tier_speed(service_tier: str) -> float:
    """Cubic feet per hour per mover."""
    speed = SERVICE_TIER_SPEED.get(service_tier)
    if speed is None:
        raise InvalidServiceType(
            f"Unknown service tier: {service_tier}. "
            f"Available: {list(SERVICE_TIER_SPEED.keys())}"
        )
    return float(speed)


def base_moving_hours(cubic_feet: float, crew_size: int, service_tier: str, service_type: str) -> float:
    """cuft / (crew × speed), scaled for Load Only / Unload Only, quarter-hour rounded."""
    if MOVING not in service_components(service_type):
        return 0.0
    if crew_size < 1:
        raise InvalidInput(f"Crew size must be at least 1, got {crew_size}")
    if cubic_feet < 0:
        raise InvalidInput(f"Cubic feet cannot be negative, got {cubic_feet}")

    hours = cubic_feet / (crew_size * tier_speed(service_tier))
    hours *= MOVING_TIME_SCALE.get(service_type, 1.0)
    return quarter_hour(hours)


def apply_handicap(moving_hours: float, modifier: float, cubic_feet: float) -> float:
    """Stretch moving time by the accessibility modifier. Packing time is never touched."""
    if cubic_feet < HANDICAP_CUBIC_FEET_THRESHOLD or modifier == 1.0:
        return moving_hours
    return quarter_hour(moving_hours * modifier)


def service_time(service_type: str, moving_hours: float, packing_hours: float,
                 unpacking_hours: float) -> ServiceTime:
    """Sum the components this service bills, then apply the 2-hour minimum."""
    components = service_components(service_type)
    moving = moving_hours if MOVING in components else 0.0
    packing = packing_hours if PACKING in components else 0.0
    unpacking = unpacking_hours if UNPACKING in components else 0.0

    combined = moving + packing + unpacking
    minimum_applied = combined < MINIMUM_BILLABLE_HOURS
    billed = MINIMUM_BILLABLE_HOURS if minimum_applied else quarter_hour(combined)

    return ServiceTime(
        moving_hours=moving,
        packing_hours=packing,
        unpacking_hours=unpacking,
        combined_hours=combined,
        billed_hours=billed,
        minimum_applied=minimum_applied,
    )
