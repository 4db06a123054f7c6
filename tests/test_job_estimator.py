"""
Job estimator tests: addresses → distance → priced job.

Tests:
1-3. Handicaps from the first and last address
4-6. Routed, fallback and single-stop jobs
7.   Re-rate through the job path
"""

import asyncio

import pytest

from movequote.distance import MoveDistance, SOURCE_ROUTES
from movequote.job_estimator import (
    calculate_job_estimate, handicaps_for, pricing_inputs_for_job, rerate_job_estimate,
)
from movequote.schemas import Address, JobEstimateParams
from movequote.tracked_value import override_tracked_value


def _sample_params(**overrides):
    fields = {
        "job_id": "job-7",
        "addresses": [
            Address(full_address="233 S Wacker Dr, Chicago, IL 60606", zip="60606"),
            Address(full_address="2001 N Clark St, Chicago, IL 60614", zip="60614"),
        ],
        "move_size": "2 Bedroom Apartment",
        "service_tier": "Full Service",
        "service_type": "Moving",
    }
    fields.update(overrides)
    return JobEstimateParams(**fields)


# --- Handicaps ---

def test_handicaps_for_address():
    factors = handicaps_for(Address(full_address="x", stairs=2, walk_distance=150, elevator=True))
    assert factors.stairs == 2
    assert factors.walk_feet == 150
    assert factors.elevator
    assert handicaps_for(None) is None


def test_origin_and_destination_from_first_and_last_stop():
    params = _sample_params(addresses=[
        Address(full_address="Origin", stairs=1),
        Address(full_address="Storage", stairs=5),
        Address(full_address="Destination", elevator=True),
    ])
    inputs = pricing_inputs_for_job(params, MoveDistance(distance_miles=12, duration_minutes=25, source=SOURCE_ROUTES))
    assert inputs.handicap_factors.stairs == 1
    assert inputs.destination_handicap_factors.elevator
    assert inputs.destination_handicap_factors.stairs == 0
    assert inputs.distance_miles == 12
    assert inputs.travel_duration_minutes == 25


def test_single_address_has_no_destination():
    params = _sample_params(addresses=[Address(full_address="Origin", stairs=2)])
    inputs = pricing_inputs_for_job(params, MoveDistance(distance_miles=0, duration_minutes=0, source="none"))
    assert inputs.handicap_factors.stairs == 2
    assert inputs.destination_handicap_factors is None


# --- Estimates ---

def test_routed_job_estimate(fake_provider):
    result = asyncio.run(calculate_job_estimate(_sample_params(), fake_provider))
    assert result.success
    assert result.distance_source == "routes"
    assert result.data.total_cost == 859.08
    assert result.data.job_charges.job_id == "job-7"
    assert result.warnings == []


def test_fallback_distance_is_flagged(failing_provider):
    result = asyncio.run(calculate_job_estimate(_sample_params(), failing_provider))
    assert result.success
    assert result.distance_source == "postal_code"
    assert result.data.move_distance == pytest.approx(0.08)
    assert result.warnings[0].startswith("Routing provider unavailable")


def test_no_provider_still_prices():
    result = asyncio.run(calculate_job_estimate(_sample_params()))
    assert result.success
    assert "No routing provider configured: distance is an estimate" in result.warnings


def test_single_stop_job_has_no_travel(fake_provider):
    params = _sample_params(addresses=[Address(full_address="233 S Wacker Dr, Chicago, IL 60606")])
    result = asyncio.run(calculate_job_estimate(params, fake_provider))
    assert result.distance_source == "none"
    assert result.data.travel_cost == 0
    assert fake_provider.calls == []


def test_destination_stairs_raise_crew(fake_provider):
    params = _sample_params(
        move_size="3 Bedroom House",
        addresses=[
            Address(full_address="Origin 60606"),
            Address(full_address="Destination 60614", stairs=2),
        ],
    )
    result = asyncio.run(calculate_job_estimate(params, fake_provider))
    assert result.data.handicap.destination_percent == pytest.approx(0.18)
    assert result.data.crew_size == result.data.base_crew_size + 1


def test_invalid_job_reports_errors(fake_provider):
    result = asyncio.run(calculate_job_estimate(_sample_params(move_size="Castle"), fake_provider))
    assert not result.success
    assert result.errors[0].field == "move_size"


# --- Re-rate ---

def test_rerate_job_keeps_overrides(make_provider):
    existing = asyncio.run(calculate_job_estimate(_sample_params(), make_provider())).data.job_charges
    existing = existing.model_copy(update={"number_of_trucks": override_tracked_value(existing.number_of_trucks, 2)})

    result = asyncio.run(rerate_job_estimate(_sample_params(), existing, make_provider(miles=20, minutes=40)))

    charges = result.data.job_charges
    assert charges.number_of_trucks.value == 2
    assert charges.number_of_trucks.estimated_value == 1
    travel = next(c for c in charges.charges if c.type == "travel")
    assert travel.amount.value == 112.67
    assert result.distance_source == "routes"
