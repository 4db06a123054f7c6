"""
Time estimator, handicap modifier and crew adjustment tests.

Tests:
1-3.   Quarter-hour rounding
4-7.   Packing/unpacking time (per-box minutes, room penalty, white glove)
8-12.  Base moving hours by tier and service type
13-16. Service time components and the 2-hour minimum
17-22. Handicap modifier (threshold, floor on walk distance, two locations)
23-28. Crew escalation bands and cap
"""

import pytest

from movequote.calculators.boxes import estimate_boxes
from movequote.calculators.handicap import accessibility_modifier, adjust_crew, location_percent
from movequote.calculators.timing import (
    apply_handicap, base_moving_hours, packing_time, service_time, unpacking_time,
)
from movequote.errors import InvalidInput, InvalidServiceType
from movequote.rounding import money, quarter_hour
from movequote.schemas import EstimationInputs, HandicapFactors


def _sample_boxes():
    return estimate_boxes(EstimationInputs(property_type="Apartment", bedrooms=2))


# --- Rounding ---

@pytest.mark.parametrize("hours,rounded", [
    (0, 0), (0.01, 0.25), (2.0, 2.0), (2.01, 2.25), (4.64375, 4.75), (1.9375, 2.0),
])
def test_quarter_hour_rounds_up(hours, rounded):
    assert quarter_hour(hours) == rounded


def test_quarter_hour_ignores_float_noise():
    assert quarter_hour(0.1 + 0.2 + 0.45 + 0.25 + 1.0) == 2.0


def test_money_rounds_half_up():
    assert money(2.675) == 2.68
    assert money(20.245) == 20.25
    assert money(429.00000000000006) == 429.0


# --- Packing / unpacking ---

def test_packing_time_two_bedroom_apartment():
    """479 box-minutes / 4 workers + 4 rooms × 15 / 4 = 134.75 minutes."""
    boxes = _sample_boxes()
    packing = packing_time(boxes.boxes, boxes.room_count, workers=4)
    assert packing.per_box_minutes["Dish Pack"] == pytest.approx(21.0)
    assert packing.room_penalty_minutes == pytest.approx(15.0)
    assert packing.total_minutes == pytest.approx(134.75)
    assert packing.total_hours == 2.25


def test_unpacking_time_two_bedroom_apartment():
    boxes = _sample_boxes()
    unpacking = unpacking_time(boxes.boxes, boxes.room_count, workers=4)
    assert unpacking.total_minutes == pytest.approx(116.25)
    assert unpacking.total_hours == 2.0


def test_white_glove_adds_twenty_percent():
    boxes = _sample_boxes()
    packing = packing_time(boxes.boxes, boxes.room_count, workers=4, white_glove=True)
    assert packing.white_glove_minutes == pytest.approx(26.95)
    assert packing.total_minutes == pytest.approx(161.7)
    assert packing.total_hours == 2.75


def test_packing_needs_a_worker():
    boxes = _sample_boxes()
    with pytest.raises(InvalidInput):
        packing_time(boxes.boxes, boxes.room_count, workers=0)


# --- Moving hours ---

def test_base_moving_hours_full_service():
    # 743 / (2 × 80) = 4.64 → 4.75
    assert base_moving_hours(743, 2, "Full Service", "Moving") == 4.75


def test_base_moving_hours_by_tier():
    assert base_moving_hours(950, 2, "Grab-n-Go", "Moving") == 5.0
    assert base_moving_hours(700, 2, "White Glove", "Moving") == 5.0


def test_load_and_unload_only_scale():
    assert base_moving_hours(1000, 2, "Full Service", "Load Only") == 3.75
    assert base_moving_hours(1000, 2, "Full Service", "Unload Only") == 2.5


def test_packing_only_has_no_moving_time():
    assert base_moving_hours(1000, 2, "Full Service", "Packing") == 0.0
    assert base_moving_hours(1000, 2, "Full Service", "Unpacking") == 0.0


def test_unknown_tier_and_type():
    with pytest.raises(InvalidServiceType):
        base_moving_hours(1000, 2, "Turbo", "Moving")
    with pytest.raises(InvalidServiceType):
        base_moving_hours(1000, 2, "Full Service", "Teleport")


def test_handicap_stretches_moving_time_and_rerounds():
    assert apply_handicap(3.0, 1.18, 720) == 3.75
    assert apply_handicap(3.0, 1.18, 399) == 3.0


# --- Service time ---

def test_moving_and_packing_components():
    time = service_time("Moving and Packing", 3.0, 2.5, 2.0)
    assert time.unpacking_hours == 0
    assert time.billed_hours == 5.5
    assert not time.minimum_applied


def test_full_service_components():
    time = service_time("Full Service", 3.0, 2.5, 2.0)
    assert time.billed_hours == 7.5


def test_minimum_two_hours_applied():
    time = service_time("Moving", 0.5, 0, 0)
    assert time.billed_hours == 2.0
    assert time.combined_hours == 0.5
    assert time.minimum_applied


def test_minimum_not_flagged_at_exactly_two_hours():
    time = service_time("Moving", 2.0, 0, 0)
    assert time.billed_hours == 2.0
    assert not time.minimum_applied


# --- Handicap modifier ---

def test_modifier_worked_example():
    result = accessibility_modifier(400, HandicapFactors(stairs=2, walk_feet=100, elevator=True))
    assert result.modifier == pytest.approx(1.45)
    assert result.applied


def test_modifier_ignored_below_threshold():
    result = accessibility_modifier(399, HandicapFactors(stairs=3))
    assert result.modifier == 1.0
    assert not result.applied
    assert result.warnings == ["Handicap factors ignored: cubic feet (399) below threshold (400)"]


def test_no_warning_without_factors():
    result = accessibility_modifier(75, HandicapFactors())
    assert result.warnings == []


def test_walk_distance_uses_whole_hundreds():
    assert location_percent(HandicapFactors(walk_feet=199)) == pytest.approx(0.09)
    assert location_percent(HandicapFactors(walk_feet=99)) == 0


def test_three_flights_hit_the_threshold_exactly():
    assert location_percent(HandicapFactors(stairs=3)) == 0.27


def test_origin_and_destination_add_up():
    result = accessibility_modifier(
        800, HandicapFactors(stairs=1), HandicapFactors(elevator=True)
    )
    assert result.origin_percent == pytest.approx(0.09)
    assert result.destination_percent == pytest.approx(0.18)
    assert result.modifier == pytest.approx(1.27)


# --- Crew adjustment ---

def test_adds_one_mover_at_first_threshold():
    adjustment = adjust_crew(720, 2, 1.18)
    assert adjustment.adjusted_crew == 3
    assert adjustment.reasoning == "Added 1 mover: handicap 18% >= 18% threshold (600+ cuft range)"


def test_adds_two_movers_at_second_threshold():
    adjustment = adjust_crew(720, 2, 1.36)
    assert adjustment.adjusted_crew == 4
    assert adjustment.movers_added == 2


def test_mid_band_thresholds():
    assert adjust_crew(400, 2, 1.45).adjusted_crew == 3
    assert adjust_crew(599, 2, 1.54).adjusted_crew == 4
    assert adjust_crew(599, 2, 1.26).adjusted_crew == 2


def test_no_escalation_below_threshold_volume():
    adjustment = adjust_crew(399, 2, 2.0)
    assert adjustment.adjusted_crew == 2
    assert "below handicap threshold" in adjustment.reasoning


def test_escalation_capped_at_seven():
    adjustment = adjust_crew(3500, 6, 1.5)
    assert adjustment.adjusted_crew == 7
    assert adjustment.movers_added == 1
    assert "capped at 7" in adjustment.reasoning


def test_forced_crew_not_escalated():
    adjustment = adjust_crew(720, 2, 1.5, forced=True)
    assert adjustment.adjusted_crew == 2
