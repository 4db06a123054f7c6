"""
Pricing Engine.

Runs the full quote pipeline for one job:
  volume → crew → handicap/crew adjustment → boxes → time → rate
  → travel → day split → charges

Pure math, no I/O. Distance and drive time arrive already resolved
(see job_estimator for the async lookup).

Input: PricingInputs
Output: PricingResult envelope {success, data, errors, warnings}
"""

import logging
from typing import Optional, Tuple

from .calculators.boxes import (
    estimate_boxes, estimate_boxes_or_default, estimation_inputs_for_move_size,
    material_cost, crew_size_for_boxes,
)
from .calculators.day_split import split_days
from .calculators.handicap import accessibility_modifier, adjust_crew
from .calculators.rates import hourly_rate
from .calculators.timing import (
    apply_handicap, base_moving_hours, packing_time, service_components,
    service_time, tier_speed, unpacking_time,
)
from .calculators.travel import (
    additional_truck_cost, emergency_service_cost, special_items_cost, travel_charges,
)
from .calculators.volume import base_crew_size, cubic_feet_for, inventory_cubic_feet, required_trucks
from .charge_builder import build_job_charges, rerate_charges
from .errors import CALCULATION_ERROR, CalculationError, InvalidInput
from .rounding import money
from .schemas import (
    JobChargeData, PricingBreakdown, PricingInputs, PricingResult, PricingResultData,
    QuickPrice, ValidationIssue,
)
from .tables import DEFAULT_SERVICE_TIER, DEFAULT_TIER_FOR_SERVICE, PACKING, UNPACKING
from .validation import validate_pricing_inputs

logger = logging.getLogger(__name__)


def resolve_service_tier(inputs: PricingInputs) -> str:
    if inputs.service_tier:
        return inputs.service_tier
    return DEFAULT_TIER_FOR_SERVICE.get(inputs.service_type, DEFAULT_SERVICE_TIER)


def _resolve_cubic_feet(inputs: PricingInputs, warnings: list) -> float:
    if inputs.custom_cubic_feet is not None:
        cubic_feet = cubic_feet_for(custom_cubic_feet=inputs.custom_cubic_feet)
        warnings.append(f"Using custom cubic feet: {cubic_feet:g}")
        return cubic_feet
    if inputs.inventory:
        cubic_feet = inventory_cubic_feet(inputs.inventory)
        if cubic_feet <= 0:
            raise InvalidInput("Inventory must add up to more than 0 cubic feet")
        return cubic_feet
    return cubic_feet_for(move_size=inputs.move_size)


def _estimation_inputs(inputs: PricingInputs):
    """Explicit estimation inputs win; otherwise derive them from the move size."""
    estimation = inputs.estimation
    if estimation is not None and (estimation.property_type or estimation.fixed_estimate_type):
        return estimation
    intensity = estimation.packing_intensity if estimation else "Normal"
    white_glove = estimation.white_glove_service if estimation else False
    derived = estimation_inputs_for_move_size(inputs.move_size, intensity, white_glove)
    return derived if derived is not None else estimation


def run_pricing_pipeline(inputs: PricingInputs, job_id: Optional[str] = None) -> Tuple[PricingResultData, list]:
    """
    Price validated inputs. Raises CalculationError subclasses on bad values.

    Returns (result, warnings).
    """
    warnings = []
    service_type = inputs.service_type
    service_tier = resolve_service_tier(inputs)
    components = service_components(service_type)
    speed = tier_speed(service_tier)

    # --- Volume & crew ---
    cubic_feet = _resolve_cubic_feet(inputs, warnings)
    forced = inputs.forced_crew_size is not None
    base_crew = base_crew_size(cubic_feet, inputs.forced_crew_size)
    if forced:
        warnings.append(f"Using forced crew size: {base_crew}")

    # --- Handicaps & crew adjustment ---
    handicap = accessibility_modifier(cubic_feet, inputs.handicap_factors, inputs.destination_handicap_factors)
    warnings.extend(handicap.warnings)
    adjustment = adjust_crew(cubic_feet, base_crew, handicap.modifier, forced=forced)
    crew = adjustment.adjusted_crew
    if adjustment.movers_added:
        warnings.append(f"Crew size adjusted from {base_crew} to {crew}: {adjustment.reasoning}")

    # --- Boxes & materials ---
    needs_packing = PACKING in components
    needs_unpacking = UNPACKING in components
    estimation_inputs = _estimation_inputs(inputs)
    box_estimate = materials = recommended_crew = None
    if needs_packing or needs_unpacking:
        box_estimate, fallback_warnings = estimate_boxes_or_default(estimation_inputs)
        warnings.extend(fallback_warnings)
    elif estimation_inputs is not None and (estimation_inputs.property_type or estimation_inputs.fixed_estimate_type):
        box_estimate = estimate_boxes(estimation_inputs)
    if box_estimate is not None:
        recommended_crew = crew_size_for_boxes(box_estimate.total_boxes)
    if needs_packing:
        materials = material_cost(box_estimate.boxes)

    # --- Time ---
    white_glove = service_type == "White Glove" or bool(
        estimation_inputs is not None and estimation_inputs.white_glove_service
    )
    moving_hours = base_moving_hours(cubic_feet, crew, service_tier, service_type)
    moving_hours = apply_handicap(moving_hours, handicap.modifier, cubic_feet)
    packing_hours = unpacking_hours = 0.0
    if needs_packing:
        packing_hours = packing_time(box_estimate.boxes, box_estimate.room_count, crew, white_glove).total_hours
    if needs_unpacking:
        unpacking_hours = unpacking_time(box_estimate.boxes, box_estimate.room_count, crew, white_glove).total_hours
    time = service_time(service_type, moving_hours, packing_hours, unpacking_hours)

    # --- Rate & travel ---
    rate = hourly_rate(service_type, crew)
    truck_count = required_trucks(cubic_feet) + inputs.additional_trucks
    travel = travel_charges(inputs.distance_miles, rate, truck_count, inputs.travel_duration_minutes)
    truck_cost = additional_truck_cost(truck_count, time.billed_hours)
    emergency_cost = emergency_service_cost(inputs.emergency_service, time.billed_hours)
    if inputs.emergency_service:
        warnings.append(f"Emergency service surcharge applied: ${money(emergency_cost):.2f}")
    special_cost = special_items_cost(inputs.special_items, inputs.specialty_items)
    materials_total = materials.total if materials is not None else 0.0

    # --- Day split ---
    total_hours = time.billed_hours + travel.travel_time_hours
    day_split = split_days(total_hours, travel.move_type)
    if day_split.days > 1:
        warnings.append(f"Move split into {day_split.days} days: {day_split.reasoning}")

    labor_cost = time.billed_hours * rate
    total_cost = (
        labor_cost + travel.travel_cost + travel.mileage_cost + travel.fuel_cost
        + truck_cost + emergency_cost + materials_total + special_cost
    )

    result = PricingResultData(
        move_size=inputs.move_size,
        cubic_feet=cubic_feet,
        service_tier=service_tier,
        service_type=service_type,
        service_tier_speed=speed,
        base_crew_size=base_crew,
        crew_size=crew,
        crew_adjustment=adjustment,
        recommended_crew_from_boxes=recommended_crew,
        handicap=handicap,
        hourly_rate=rate,
        time=time,
        travel=travel,
        move_distance=inputs.distance_miles,
        move_type=travel.move_type,
        total_hours=total_hours,
        day_split=day_split,
        truck_count=truck_count,
        labor_cost=money(labor_cost),
        travel_cost=money(travel.travel_cost),
        mileage_cost=money(travel.mileage_cost),
        fuel_cost=money(travel.fuel_cost),
        additional_truck_cost=money(truck_cost),
        emergency_service_cost=money(emergency_cost),
        materials_cost=materials_total,
        special_items_cost=money(special_cost),
        total_cost=money(total_cost),
        box_estimate=box_estimate,
        materials=materials,
    )
    result = result.model_copy(update={"job_charges": build_job_charges(result, job_id)})
    logger.info(
        "Priced %s job: %.0f cuft, crew %d, %.2f billed hours, total $%.2f",
        service_type, cubic_feet, crew, time.billed_hours, result.total_cost,
    )
    return result, warnings


def _failure(field: str, message: str, code: str = CALCULATION_ERROR) -> PricingResult:
    return PricingResult(success=False, errors=[ValidationIssue(field=field, message=message, code=code)])


def calculate_pricing(inputs: PricingInputs, job_id: Optional[str] = None) -> PricingResult:
    """Validate, then price. Never raises for bad input."""
    issues = validate_pricing_inputs(inputs)
    if issues:
        return PricingResult(success=False, errors=issues)

    try:
        data, warnings = run_pricing_pipeline(inputs, job_id)
    except CalculationError as e:
        logger.warning("Pricing calculation failed: %s", e)
        return _failure("calculation", str(e), e.code)
    except Exception as e:
        logger.exception("Unexpected error during pricing")
        return _failure("calculation", f"Pricing calculation failed: {e}")

    return PricingResult(success=True, data=data, warnings=warnings)


def rerate_pricing(inputs: PricingInputs, existing: JobChargeData) -> PricingResult:
    """Re-price from current inputs, keeping every field the user overrode."""
    result = calculate_pricing(inputs, job_id=existing.job_id)
    if not result.success:
        return result
    merged = rerate_charges(existing, result.data.job_charges)
    return result.model_copy(update={"data": result.data.model_copy(update={"job_charges": merged})})


def _error_text(result: PricingResult) -> str:
    return "; ".join(f"{e.field}: {e.message}" for e in result.errors)


def calculate_quick_price(move_size: str, service_tier: str, service_type: str,
                          distance_miles: float = 0.0) -> QuickPrice:
    result = calculate_pricing(PricingInputs(
        move_size=move_size,
        service_tier=service_tier,
        service_type=service_type,
        distance_miles=distance_miles,
    ))
    if not result.success:
        return QuickPrice(success=False, error=_error_text(result))
    data = result.data
    return QuickPrice(
        success=True,
        price=data.total_cost,
        time_hours=data.total_hours,
        crew_size=data.crew_size,
    )


def get_pricing_breakdown(inputs: PricingInputs) -> PricingBreakdown:
    result = calculate_pricing(inputs)
    if not result.success:
        return PricingBreakdown(success=False, error=_error_text(result))
    data = result.data
    return PricingBreakdown(
        success=True,
        labor_cost=data.labor_cost,
        travel_costs={
            "travel": data.travel_cost,
            "mileage": data.mileage_cost,
            "fuel": data.fuel_cost,
            "additional_trucks": data.additional_truck_cost,
        },
        additional_services={
            "materials": data.materials_cost,
            "special_items": data.special_items_cost,
            "emergency_service": data.emergency_service_cost,
        },
        total=data.total_cost,
        time_estimate={
            "moving_hours": data.time.moving_hours,
            "packing_hours": data.time.packing_hours,
            "unpacking_hours": data.time.unpacking_hours,
            "billed_hours": data.time.billed_hours,
            "travel_hours": data.travel.travel_time_hours,
            "total_hours": data.total_hours,
        },
        crew_size=data.crew_size,
        day_split=data.day_split,
    )
