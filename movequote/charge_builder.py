"""
Charge builder & re-rater.

Turns a priced job into the itemized JobChargeData the persistence layer
stores, and re-rates a stored charge set without losing user overrides.

Item order is fixed:
  packing, load, travel, unload, unpacking, materials, mileage, fuel,
  additional_trucks, special_items, emergency_service
"""

import logging
from typing import Optional

from .rounding import money, quarter_hour
from .schemas import JobChargeData, JobChargeItem, PricingResultData
from .tables import LOAD_SHARE, UNLOAD_SHARE, MINIMUM_BILLABLE_HOURS, MOVING, SERVICE_COMPONENTS
from .tracked_value import create_tracked_value, merge

logger = logging.getLogger(__name__)

CHARGE_ORDER = (
    "packing",
    "load",
    "travel",
    "unload",
    "unpacking",
    "materials",
    "mileage",
    "fuel",
    "additional_trucks",
    "special_items",
    "emergency_service",
)

TRACKED_FIELDS = (
    "number_of_crew",
    "number_of_trucks",
    "hourly_rate",
    "hours",
    "packing_hours",
    "unpacking_hours",
    "origin_handicaps",
    "destination_handicaps",
    "minimum_time",
    "fuel_cost",
    "mileage_cost",
    "item_cost",
)

ITEM_TRACKED_FIELDS = ("amount", "is_billable")


def _labor_item(charge_type: str, hours: float, rate: float, crew: int) -> JobChargeItem:
    return JobChargeItem(
        type=charge_type,
        hourly_rate=rate,
        hours=hours,
        number_of_crew=crew,
        amount=create_tracked_value(money(hours * rate), "$"),
        is_billable=create_tracked_value(True),
    )


def _flat_item(charge_type: str, amount: float, hours: Optional[float] = None) -> JobChargeItem:
    return JobChargeItem(
        type=charge_type,
        hours=hours,
        amount=create_tracked_value(money(amount), "$"),
        is_billable=create_tracked_value(True),
    )


def load_unload_hours(service_type: str, net_moving_hours: float) -> tuple:
    """(load, unload) hours. Single-direction jobs put all moving time on one side."""
    if service_type == "Load Only":
        return quarter_hour(net_moving_hours), 0.0
    if service_type == "Unload Only":
        return 0.0, quarter_hour(net_moving_hours)
    return quarter_hour(net_moving_hours * LOAD_SHARE), quarter_hour(net_moving_hours * UNLOAD_SHARE)


def build_charge_items(result: PricingResultData) -> list:
    rate = result.hourly_rate
    crew = result.crew_size
    time = result.time
    travel = result.travel
    items = {}

    if time.packing_hours > 0:
        items["packing"] = _labor_item("packing", time.packing_hours, rate, crew)

    if MOVING in SERVICE_COMPONENTS[result.service_type]:
        net_moving = max(0.0, time.billed_hours - time.packing_hours - time.unpacking_hours)
        load_hours, unload_hours = load_unload_hours(result.service_type, net_moving)
        if load_hours > 0:
            items["load"] = _labor_item("load", load_hours, rate, crew)
        if unload_hours > 0:
            items["unload"] = _labor_item("unload", unload_hours, rate, crew)

    if travel.travel_time_hours > 0:
        billable = travel.travel_cost > 0
        items["travel"] = JobChargeItem(
            type="travel",
            hourly_rate=rate if billable else 0.0,
            hours=travel.travel_time_hours,
            driving_time_mins=travel.travel_time_hours * 60,
            amount=create_tracked_value(money(travel.travel_cost), "$"),
            is_billable=create_tracked_value(billable),
        )

    if time.unpacking_hours > 0:
        items["unpacking"] = _labor_item("unpacking", time.unpacking_hours, rate, crew)

    for charge_type, amount, hours in (
        ("materials", result.materials_cost, None),
        ("mileage", result.mileage_cost, None),
        ("fuel", result.fuel_cost, None),
        ("additional_trucks", result.additional_truck_cost, time.billed_hours),
        ("special_items", result.special_items_cost, None),
        ("emergency_service", result.emergency_service_cost, time.billed_hours),
    ):
        if amount > 0:
            items[charge_type] = _flat_item(charge_type, amount, hours)

    return [items[charge_type] for charge_type in CHARGE_ORDER if charge_type in items]


def build_job_charges(result: PricingResultData, job_id: Optional[str] = None) -> JobChargeData:
    time = result.time
    minimum_time = None
    if time.minimum_applied:
        minimum_time = create_tracked_value(MINIMUM_BILLABLE_HOURS, "hours")

    return JobChargeData(
        job_id=job_id,
        number_of_crew=create_tracked_value(result.crew_size, "workers"),
        number_of_trucks=create_tracked_value(result.truck_count, "trucks"),
        hourly_rate=create_tracked_value(result.hourly_rate, "$/hr"),
        hours=create_tracked_value(time.billed_hours, "hours"),
        packing_hours=create_tracked_value(time.packing_hours, "hours"),
        unpacking_hours=create_tracked_value(time.unpacking_hours, "hours"),
        origin_handicaps=create_tracked_value(result.handicap.origin_percent),
        destination_handicaps=create_tracked_value(result.handicap.destination_percent),
        minimum_time=minimum_time,
        fuel_cost=create_tracked_value(money(result.fuel_cost), "$"),
        mileage_cost=create_tracked_value(money(result.mileage_cost), "$"),
        item_cost=create_tracked_value(money(result.materials_cost), "$"),
        charges=build_charge_items(result),
    )


def _has_override(item: JobChargeItem) -> bool:
    return any(getattr(item, name).is_overridden for name in ITEM_TRACKED_FIELDS)


def _merge_item(old: JobChargeItem, fresh: JobChargeItem) -> JobChargeItem:
    return fresh.model_copy(update={
        name: merge(getattr(old, name), getattr(fresh, name)) for name in ITEM_TRACKED_FIELDS
    })


def _merge_items(existing: list, fresh: list) -> list:
    old_by_type = {item.type: item for item in existing}
    merged = {}
    for item in fresh:
        old = old_by_type.get(item.type)
        merged[item.type] = _merge_item(old, item) if old is not None else item

    # Lines the user edited survive even when the fresh quote no longer produces them
    for item in existing:
        if item.type not in merged and _has_override(item):
            logger.info("Keeping overridden %s charge that re-rating no longer produces", item.type)
            merged[item.type] = item

    ordered = [merged.pop(t) for t in CHARGE_ORDER if t in merged]
    return ordered + list(merged.values())


def rerate_charges(existing: JobChargeData, fresh: JobChargeData) -> JobChargeData:
    """
    Fresh values everywhere except fields the user overrode.

    job_id always comes from the existing record.
    """
    updates = {"job_id": existing.job_id}
    for name in TRACKED_FIELDS:
        old = getattr(existing, name)
        new = getattr(fresh, name)
        if new is None:
            # e.g. minimum_time no longer binding: keep it only if the user set it
            updates[name] = old if old is not None and old.is_overridden else None
        else:
            updates[name] = merge(old, new)
    updates["charges"] = _merge_items(existing.charges, fresh.charges)
    return fresh.model_copy(update=updates)
