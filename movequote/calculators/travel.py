"""
Travel & distance charges.

Two billing modes split at the long-distance threshold (30 mi):
  local:  drive time billed at the crew's hourly rate
  long:   drive time free; mileage + fuel per mile per truck instead
"""

from typing import Optional

from ..errors import InvalidInput
from ..schemas import TravelCharges
from ..tables import (
    LOCAL, REGIONAL, LONG_DISTANCE, LOCAL_MAX_MILES, REGIONAL_MAX_MILES,
    LONG_DISTANCE_THRESHOLD_MILES, MILEAGE_RATE_PER_MILE, FUEL_RATE_PER_MILE,
    ADDITIONAL_TRUCK_HOURLY, EMERGENCY_SERVICE_HOURLY, TRAVEL_SPEED_MPH,
    SPECIALTY_ITEM_TIERS,
)


def classify_move(distance_miles: float) -> str:
    if distance_miles < 0:
        raise InvalidInput(f"Distance cannot be negative, got {distance_miles}")
    if distance_miles <= LOCAL_MAX_MILES:
        return LOCAL
    if distance_miles <= REGIONAL_MAX_MILES:
        return REGIONAL
    return LONG_DISTANCE


def estimated_duration_minutes(distance_miles: float) -> float:
    """Drive time when the router gave us none."""
    return distance_miles / TRAVEL_SPEED_MPH * 60


def travel_charges(distance_miles: float, hourly_rate: float, truck_count: int = 1,
                   duration_minutes: Optional[float] = None) -> TravelCharges:
    move_type = classify_move(distance_miles)
    if truck_count < 1:
        raise InvalidInput(f"Truck count must be at least 1, got {truck_count}")
    if duration_minutes is None:
        duration_minutes = estimated_duration_minutes(distance_miles)
    if duration_minutes < 0:
        raise InvalidInput(f"Travel duration cannot be negative, got {duration_minutes}")

    travel_time_hours = duration_minutes / 60
    is_long_distance = distance_miles > LONG_DISTANCE_THRESHOLD_MILES

    # no distance, no drive: a router duration alone is never billed
    if distance_miles == 0:
        travel_time_hours = 0.0
        travel_cost = mileage_cost = fuel_cost = 0.0
    elif is_long_distance:
        travel_cost = 0.0
        mileage_cost = distance_miles * MILEAGE_RATE_PER_MILE * truck_count
        fuel_cost = distance_miles * FUEL_RATE_PER_MILE * truck_count
    else:
        travel_cost = travel_time_hours * hourly_rate
        mileage_cost = fuel_cost = 0.0

    return TravelCharges(
        distance_miles=distance_miles,
        move_type=move_type,
        is_long_distance=is_long_distance,
        travel_time_hours=travel_time_hours,
        travel_cost=travel_cost,
        mileage_cost=mileage_cost,
        fuel_cost=fuel_cost,
        truck_count=truck_count,
    )


def additional_truck_cost(truck_count: int, billed_hours: float) -> float:
    """Every truck past the first costs $30/hr for the billed time."""
    return max(0, truck_count - 1) * ADDITIONAL_TRUCK_HOURLY * billed_hours


def emergency_service_cost(emergency_service: bool, billed_hours: float) -> float:
    return EMERGENCY_SERVICE_HOURLY * billed_hours if emergency_service else 0.0


def special_items_cost(special_items, specialty_items=()) -> float:
    """Priced special items plus tiered specialty items (pianos, safes...)."""
    total = 0.0
    for item in special_items:
        if item.price < 0 or item.quantity < 0:
            raise InvalidInput(f"Special item {item.name!r} has a negative price or quantity")
        total += item.price * item.quantity
    for item in specialty_items:
        if item.tier not in SPECIALTY_ITEM_TIERS:
            raise InvalidInput(
                f"Unknown specialty tier {item.tier!r} for {item.name!r}. "
                f"Available: {list(SPECIALTY_ITEM_TIERS.keys())}"
            )
        if item.quantity < 0:
            raise InvalidInput(f"Specialty item {item.name!r} has a negative quantity")
        total += SPECIALTY_ITEM_TIERS[item.tier] * item.quantity
    return total
