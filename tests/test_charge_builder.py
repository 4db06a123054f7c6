"""
Charge builder & re-rate tests.

Tests:
1-4.  Charge items and their fixed order
5-6.  Load/unload split
7-8.  Job-level tracked fields (minimum time, item cost)
9-12. Re-rating with user overrides
"""

import pytest

from movequote.charge_builder import CHARGE_ORDER, build_job_charges, load_unload_hours, rerate_charges
from movequote.pricing_engine import calculate_pricing
from movequote.schemas import PricingInputs
from movequote.tracked_value import override_tracked_value


def _sample_result(**overrides):
    fields = {
        "move_size": "2 Bedroom Apartment",
        "service_tier": "Full Service",
        "service_type": "Moving",
        "distance_miles": 10,
        "travel_duration_minutes": 20,
    }
    fields.update(overrides)
    result = calculate_pricing(PricingInputs(**fields), job_id="job-1")
    assert result.success, result.errors
    return result.data


def _charge(charges, charge_type):
    return next(item for item in charges.charges if item.type == charge_type)


def _override_item(charges, charge_type, amount):
    items = [
        item.model_copy(update={"amount": override_tracked_value(item.amount, amount)})
        if item.type == charge_type else item
        for item in charges.charges
    ]
    return charges.model_copy(update={"charges": items})


# --- Charge items ---

def test_local_move_items():
    charges = _sample_result().job_charges
    assert [c.type for c in charges.charges] == ["load", "travel", "unload"]

    load = _charge(charges, "load")
    assert load.hours == 3.0
    assert load.hourly_rate == 169
    assert load.number_of_crew == 2
    assert load.amount.value == 507.0
    assert load.is_billable.value is True

    travel = _charge(charges, "travel")
    assert travel.driving_time_mins == pytest.approx(20)
    assert travel.amount.value == 56.33


def test_long_distance_travel_is_not_billable():
    charges = _sample_result(move_size="2 Bedroom House", distance_miles=100, travel_duration_minutes=None).job_charges
    assert [c.type for c in charges.charges] == ["load", "travel", "unload", "mileage", "fuel"]
    travel = _charge(charges, "travel")
    assert travel.is_billable.value is False
    assert travel.hourly_rate == 0
    assert travel.amount.value == 0
    assert _charge(charges, "mileage").amount.value == 429.0


def test_full_service_items_in_order():
    charges = _sample_result(service_type="Full Service", distance_miles=0, travel_duration_minutes=None).job_charges
    assert [c.type for c in charges.charges] == ["packing", "load", "unload", "unpacking", "materials"]
    assert _charge(charges, "packing").hours == 4.5
    assert _charge(charges, "load").hours == 3.0
    assert _charge(charges, "unload").hours == 2.0
    assert _charge(charges, "materials").amount.value == pytest.approx(476.14)


def test_all_optional_items_follow_fixed_order():
    charges = _sample_result(
        move_size="2 Bedroom House",
        service_type="Full Service",
        distance_miles=100,
        additional_trucks=1,
        emergency_service=True,
        special_items=[{"name": "Pool table", "price": 300}],
    ).job_charges
    types = [c.type for c in charges.charges]
    assert types == [t for t in CHARGE_ORDER if t in types]
    assert types[-3:] == ["additional_trucks", "special_items", "emergency_service"]


def test_zero_distance_has_no_travel_item():
    charges = _sample_result(move_size="Room or Less", distance_miles=0, travel_duration_minutes=None).job_charges
    assert [c.type for c in charges.charges] == ["load", "unload"]


def test_zero_distance_with_duration_has_no_travel_item():
    data = _sample_result(move_size="Room or Less", distance_miles=0, travel_duration_minutes=20)
    assert [c.type for c in data.job_charges.charges] == ["load", "unload"]
    assert data.total_hours == data.time.billed_hours


# --- Load / unload split ---

def test_load_unload_split():
    assert load_unload_hours("Moving", 4.75) == (3.0, 2.0)
    assert load_unload_hours("Moving", 2.0) == (1.25, 1.0)


def test_single_direction_services():
    assert load_unload_hours("Load Only", 3.5) == (3.5, 0.0)
    assert load_unload_hours("Unload Only", 2.3) == (0.0, 2.5)


# --- Job-level fields ---

def test_minimum_time_only_when_binding():
    assert _sample_result().job_charges.minimum_time is None
    minimum = _sample_result(move_size="Room or Less", distance_miles=0).job_charges.minimum_time
    assert minimum.value == 2.0
    assert minimum.unit == "hours"


def test_tracked_job_fields():
    data = _sample_result(service_type="Full Service")
    charges = build_job_charges(data, "job-9")
    assert charges.job_id == "job-9"
    assert charges.number_of_crew.value == 2
    assert charges.number_of_trucks.value == 1
    assert charges.hours.value == 13.25
    assert charges.packing_hours.value == 4.5
    assert charges.item_cost.value == pytest.approx(476.14)
    assert not any(
        getattr(charges, name).is_overridden
        for name in ("number_of_crew", "hourly_rate", "hours", "fuel_cost")
    )


# --- Re-rate ---

def test_rerate_keeps_overridden_fields_and_items():
    existing = _sample_result().job_charges
    existing = existing.model_copy(update={"hourly_rate": override_tracked_value(existing.hourly_rate, 150)})
    existing = _override_item(existing, "load", 400)

    fresh = _sample_result(distance_miles=20, travel_duration_minutes=40).job_charges
    merged = rerate_charges(existing, fresh)

    assert merged.hourly_rate.value == 150
    assert merged.hourly_rate.estimated_value == 169
    load = _charge(merged, "load")
    assert load.amount.value == 400
    assert load.amount.estimated_value == 507.0

    travel = _charge(merged, "travel")
    assert travel.amount.value == 112.67
    assert travel.amount.initial_value == 56.33
    assert merged.job_id == "job-1"


def test_rerate_keeps_overridden_item_that_disappears():
    existing = _sample_result(move_size="2 Bedroom House", distance_miles=100).job_charges
    existing = _override_item(existing, "mileage", 300)

    fresh = _sample_result(move_size="2 Bedroom House").job_charges
    merged = rerate_charges(existing, fresh)

    types = [c.type for c in merged.charges]
    assert types == ["load", "travel", "unload", "mileage"]
    assert _charge(merged, "mileage").amount.value == 300


def test_rerate_drops_minimum_time_unless_overridden():
    existing = _sample_result(move_size="Room or Less", distance_miles=0).job_charges
    fresh = _sample_result().job_charges
    assert rerate_charges(existing, fresh).minimum_time is None

    pinned = existing.model_copy(update={"minimum_time": override_tracked_value(existing.minimum_time, 3.0)})
    assert rerate_charges(pinned, fresh).minimum_time.value == 3.0


def test_rerate_without_overrides_matches_fresh_values():
    existing = _sample_result().job_charges
    fresh = _sample_result(move_size="3 Bedroom House").job_charges
    merged = rerate_charges(existing, fresh)
    assert merged.hourly_rate.value == fresh.hourly_rate.value
    assert merged.hours.value == fresh.hours.value
    assert merged.hours.initial_value == existing.hours.initial_value
    assert [c.amount.value for c in merged.charges] == [c.amount.value for c in fresh.charges]
