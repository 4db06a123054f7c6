"""
Estimation Engine: boxes, materials and packing/unpacking time.

Input: EstimationInputs
Output: EstimationResult envelope {success, data, errors, warnings}

calculate_comprehensive_estimation is the strict entry point: inputs must
validate. The quick/breakdown views are previews and fall back to a default
one-bedroom apartment when no property or fixed type is given.
"""

import logging
from typing import Optional

from .calculators.boxes import (
    crew_size_for_boxes, estimate_boxes, estimate_boxes_or_default, material_cost,
)
from .calculators.timing import packing_time, unpacking_time
from .errors import CALCULATION_ERROR, INVALID_SERVICE_TYPE, CalculationError
from .schemas import (
    EstimationBreakdown, EstimationInputs, EstimationResult, EstimationResultData,
    PricingIntegrationData, QuickEstimation, ValidationIssue,
)
from .tables import (
    SERVICE_COMPONENTS, PACKING, UNPACKING, LARGE_JOB_CREW_WARNING, MULTI_DAY_WARNING_HOURS,
    WHITE_GLOVE_TIME_MODIFIER, COMPLEXITY_MODIFIERS, LARGE_BOX_COUNT_THRESHOLD,
    LARGE_BOX_COUNT_MODIFIER, WHITE_GLOVE_COMPLEXITY_MODIFIER, LARGE_HOME_COMPLEXITY_MODIFIER,
)
from .validation import validate_estimation_inputs

logger = logging.getLogger(__name__)


def _build(inputs: EstimationInputs, box_estimate) -> EstimationResultData:
    materials = material_cost(box_estimate.boxes)
    crew = crew_size_for_boxes(box_estimate.total_boxes)
    packing = packing_time(box_estimate.boxes, box_estimate.room_count, crew, inputs.white_glove_service)
    unpacking = unpacking_time(box_estimate.boxes, box_estimate.room_count, crew, inputs.white_glove_service)
    return EstimationResultData(
        box_estimate=box_estimate,
        materials=materials,
        packing_time=packing,
        unpacking_time=unpacking,
        recommended_crew_size=crew,
        total_hours=packing.total_hours + unpacking.total_hours,
    )


def _warnings(inputs: EstimationInputs, data: EstimationResultData) -> list:
    warnings = []
    boxes = data.box_estimate

    if boxes.intensity_multiplier != 1.0:
        direction = "increased" if boxes.intensity_multiplier > 1.0 else "decreased"
        change = abs(boxes.intensity_multiplier - 1.0) * 100
        warnings.append(
            f"Box quantities {direction} by {change:g}% due to {boxes.packing_intensity} packing intensity"
        )

    if inputs.custom_room_counts:
        applied = ", ".join(f"{room}: {count}" for room, count in inputs.custom_room_counts.items())
        warnings.append(f"Custom room counts applied: {applied}")

    if data.recommended_crew_size >= LARGE_JOB_CREW_WARNING:
        warnings.append(
            f"Large job detected: {boxes.total_boxes} total boxes "
            f"require {data.recommended_crew_size} crew members"
        )

    if inputs.white_glove_service:
        warnings.append(
            f"White Glove service adds {WHITE_GLOVE_TIME_MODIFIER * 100:g}% additional time "
            f"for careful handling"
        )

    if data.total_hours > MULTI_DAY_WARNING_HOURS:
        warnings.append(f"Estimated total time: {data.total_hours:g} hours may require multiple days")

    if data.materials.rental_savings > 0:
        warnings.append(
            f"TV box rentals available: potential savings of ${data.materials.rental_savings:.2f}"
        )
    return warnings


def _failure(message: str, code: str = CALCULATION_ERROR) -> EstimationResult:
    return EstimationResult(
        success=False,
        errors=[ValidationIssue(field="calculation", message=message, code=code)],
    )


def calculate_comprehensive_estimation(inputs: EstimationInputs) -> EstimationResult:
    issues = validate_estimation_inputs(inputs)
    if issues:
        return EstimationResult(success=False, errors=issues)

    try:
        data = _build(inputs, estimate_boxes(inputs))
    except CalculationError as e:
        logger.warning("Estimation calculation failed: %s", e)
        return _failure(str(e), e.code)
    except Exception as e:
        logger.exception("Unexpected error during estimation")
        return _failure(f"Estimation calculation failed: {e}")

    return EstimationResult(success=True, data=data, warnings=_warnings(inputs, data))


def _preview(inputs: EstimationInputs) -> EstimationResult:
    """Like calculate_comprehensive_estimation, but a missing type means the default scenario."""
    if inputs.property_type or inputs.fixed_estimate_type:
        return calculate_comprehensive_estimation(inputs)
    try:
        box_estimate, warnings = estimate_boxes_or_default(inputs)
        data = _build(inputs, box_estimate)
    except CalculationError as e:
        logger.warning("Estimation preview failed: %s", e)
        return _failure(str(e), e.code)
    return EstimationResult(success=True, data=data, warnings=warnings + _warnings(inputs, data))


def _error_text(result: EstimationResult) -> str:
    return "; ".join(f"{e.field}: {e.message}" for e in result.errors)


def calculate_quick_estimation(property_type: Optional[str] = None, bedrooms: Optional[int] = None,
                               packing_intensity: str = "Normal") -> QuickEstimation:
    result = _preview(EstimationInputs(
        property_type=property_type,
        bedrooms=bedrooms,
        packing_intensity=packing_intensity,
    ))
    if not result.success:
        return QuickEstimation(success=False, error=_error_text(result))
    data = result.data
    return QuickEstimation(
        success=True,
        total_boxes=data.box_estimate.total_boxes,
        estimated_hours=data.total_hours,
        material_cost=data.materials.total,
        crew_size=data.recommended_crew_size,
    )


def get_estimation_breakdown(inputs: EstimationInputs) -> EstimationBreakdown:
    result = _preview(inputs)
    if not result.success:
        return EstimationBreakdown(success=False, error=_error_text(result))
    data = result.data
    return EstimationBreakdown(
        success=True,
        boxes=data.box_estimate.boxes,
        materials=data.materials.lines,
        packing_minutes=data.packing_time.per_box_minutes,
        unpacking_minutes=data.unpacking_time.per_box_minutes,
        totals={
            "total_boxes": data.box_estimate.total_boxes,
            "packing_hours": data.packing_time.total_hours,
            "unpacking_hours": data.unpacking_time.total_hours,
            "total_hours": data.total_hours,
            "material_cost": data.materials.total,
            "rental_savings": data.materials.rental_savings,
        },
    )


def service_complexity_modifier(inputs: EstimationInputs, total_boxes: int) -> float:
    """Packing-intensity base with job-size and handling multipliers, to 2 places."""
    modifier = COMPLEXITY_MODIFIERS[inputs.packing_intensity]
    if total_boxes > LARGE_BOX_COUNT_THRESHOLD:
        modifier *= LARGE_BOX_COUNT_MODIFIER
    if inputs.white_glove_service:
        modifier *= WHITE_GLOVE_COMPLEXITY_MODIFIER
    if inputs.property_type == "Large Home":
        modifier *= LARGE_HOME_COMPLEXITY_MODIFIER
    return round(modifier, 2)


def get_pricing_integration_data(inputs: EstimationInputs, service_type: str) -> PricingIntegrationData:
    """Estimation figures shaped for a pricing caller: only what the service type bills."""
    components = SERVICE_COMPONENTS.get(service_type)
    if components is None:
        return PricingIntegrationData(success=False, errors=[ValidationIssue(
            field="service_type",
            message=f"Unknown service type: {service_type}",
            code=INVALID_SERVICE_TYPE,
        )])

    result = calculate_comprehensive_estimation(inputs)
    if not result.success:
        return PricingIntegrationData(success=False, errors=result.errors)

    data = result.data
    includes_packing = PACKING in components
    return PricingIntegrationData(
        success=True,
        material_cost=data.materials.total if includes_packing else 0.0,
        packing_hours=data.packing_time.total_hours if includes_packing else 0.0,
        unpacking_hours=data.unpacking_time.total_hours if UNPACKING in components else 0.0,
        total_boxes=data.box_estimate.total_boxes,
        recommended_crew_size=data.recommended_crew_size,
        service_complexity_modifier=service_complexity_modifier(inputs, data.box_estimate.total_boxes),
    )
