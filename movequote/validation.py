"""
Input validation for the estimation and pricing engines.

Validators only collect ValidationIssue records; they never default or
correct a value. The engines run them before any calculation and return
early when anything is reported.
"""

from typing import List, Optional

from . import errors
from .schemas import EstimationInputs, HandicapFactors, PricingInputs, ValidationIssue
from .tables import (
    PROPERTY_TYPES, FIXED_ESTIMATES, PACKING_INTENSITY_MULTIPLIERS, ROOM_TYPES,
    CUSTOM_ROOM_COUNT_MAX, MOVE_SIZE_CUBIC_FEET, SERVICE_TIER_SPEED,
    HOURLY_RATES, MIN_CREW_SIZE, MAX_CREW_SIZE, SPECIALTY_ITEM_TIERS,
)


def _issue(field: str, message: str, code: str) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, code=code)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_estimation_inputs(inputs: EstimationInputs, prefix: str = "") -> List[ValidationIssue]:
    issues = []
    has_property = bool(inputs.property_type)
    has_fixed = bool(inputs.fixed_estimate_type)

    if not has_property and not has_fixed:
        issues.append(_issue(
            f"{prefix}property_type",
            "Either a property type or a fixed estimate type is required",
            errors.MISSING_REQUIRED_INPUTS,
        ))
    elif has_property and has_fixed:
        issues.append(_issue(
            f"{prefix}fixed_estimate_type",
            "Property type and fixed estimate type are mutually exclusive; provide only one",
            errors.MISSING_REQUIRED_INPUTS,
        ))

    if has_property:
        config = PROPERTY_TYPES.get(inputs.property_type)
        if config is None:
            issues.append(_issue(
                f"{prefix}property_type",
                f"Unknown property type: {inputs.property_type}. Valid types: {', '.join(PROPERTY_TYPES)}",
                errors.INVALID_PROPERTY_TYPE,
            ))
        elif inputs.bedrooms is not None:
            low, high = config["min_bedrooms"], config["max_bedrooms"]
            if not _is_int(inputs.bedrooms) or not low <= inputs.bedrooms <= high:
                issues.append(_issue(
                    f"{prefix}bedrooms",
                    f"{inputs.property_type} requires between {low} and {high} bedrooms, got {inputs.bedrooms}",
                    errors.INVALID_BEDROOM_COUNT,
                ))

    if has_fixed and inputs.fixed_estimate_type not in FIXED_ESTIMATES:
        issues.append(_issue(
            f"{prefix}fixed_estimate_type",
            f"Unknown fixed estimate type: {inputs.fixed_estimate_type}. "
            f"Valid types: {', '.join(FIXED_ESTIMATES)}",
            errors.INVALID_FIXED_ESTIMATE_TYPE,
        ))

    if inputs.packing_intensity not in PACKING_INTENSITY_MULTIPLIERS:
        issues.append(_issue(
            f"{prefix}packing_intensity",
            f"Unknown packing intensity: {inputs.packing_intensity}. "
            f"Valid levels: {', '.join(PACKING_INTENSITY_MULTIPLIERS)}",
            errors.INVALID_PACKING_INTENSITY,
        ))

    if inputs.custom_room_counts:
        if has_fixed and not has_property:
            issues.append(_issue(
                f"{prefix}custom_room_counts",
                "Custom room counts only apply to property-type estimates",
                errors.INVALID_CUSTOM_ROOMS,
            ))
        for room, count in inputs.custom_room_counts.items():
            field = f"{prefix}custom_room_counts.{room}"
            if room not in ROOM_TYPES:
                issues.append(_issue(field, f"Unknown room type: {room}", errors.INVALID_CUSTOM_ROOMS))
            elif not _is_int(count) or not 0 <= count <= CUSTOM_ROOM_COUNT_MAX:
                issues.append(_issue(
                    field,
                    f"Room count must be a whole number between 0 and {CUSTOM_ROOM_COUNT_MAX}, got {count}",
                    errors.INVALID_CUSTOM_ROOMS,
                ))

    return issues


def _validate_handicaps(field: str, factors: Optional[HandicapFactors]) -> List[ValidationIssue]:
    if factors is None:
        return []
    issues = []
    if factors.stairs < 0:
        issues.append(_issue(f"{field}.stairs", "Stairs cannot be negative", errors.INVALID_HANDICAP_FACTORS))
    if factors.walk_feet < 0:
        issues.append(_issue(f"{field}.walk_feet", "Walk distance cannot be negative", errors.INVALID_HANDICAP_FACTORS))
    return issues


def validate_pricing_inputs(inputs: PricingInputs) -> List[ValidationIssue]:
    issues = []

    if inputs.move_size is None and inputs.custom_cubic_feet is None and not inputs.inventory:
        issues.append(_issue(
            "move_size",
            "A move size, custom cubic feet, or an inventory is required",
            errors.MISSING_REQUIRED_INPUTS,
        ))
    if inputs.move_size is not None and inputs.move_size not in MOVE_SIZE_CUBIC_FEET:
        issues.append(_issue(
            "move_size",
            f"Unknown move size: {inputs.move_size}",
            errors.INVALID_MOVE_SIZE,
        ))
    if inputs.custom_cubic_feet is not None and inputs.custom_cubic_feet <= 0:
        issues.append(_issue(
            "custom_cubic_feet",
            "Custom cubic feet must be greater than 0",
            errors.INVALID_CUBIC_FEET,
        ))
    if inputs.inventory is not None and inputs.custom_cubic_feet is None:
        bad = [item.name for item in inputs.inventory if item.cubic_feet < 0 or item.quantity < 0]
        if bad:
            issues.append(_issue(
                "inventory",
                f"Inventory items cannot have negative size or quantity: {', '.join(bad)}",
                errors.INVALID_CUBIC_FEET,
            ))
        elif inputs.move_size is None and sum(i.cubic_feet * i.quantity for i in inputs.inventory) <= 0:
            issues.append(_issue(
                "inventory",
                "Inventory must add up to more than 0 cubic feet",
                errors.INVALID_CUBIC_FEET,
            ))

    if inputs.service_tier is not None and inputs.service_tier not in SERVICE_TIER_SPEED:
        issues.append(_issue(
            "service_tier",
            f"Unknown service tier: {inputs.service_tier}. Valid tiers: {', '.join(SERVICE_TIER_SPEED)}",
            errors.INVALID_SERVICE_TIER,
        ))
    if inputs.service_type not in HOURLY_RATES:
        issues.append(_issue(
            "service_type",
            f"Unknown service type: {inputs.service_type}. Valid types: {', '.join(HOURLY_RATES)}",
            errors.INVALID_SERVICE_TYPE,
        ))

    if inputs.distance_miles < 0:
        issues.append(_issue("distance_miles", "Distance cannot be negative", errors.INVALID_DISTANCE))
    if inputs.travel_duration_minutes is not None and inputs.travel_duration_minutes < 0:
        issues.append(_issue(
            "travel_duration_minutes", "Travel duration cannot be negative", errors.INVALID_DISTANCE,
        ))

    if inputs.forced_crew_size is not None and not MIN_CREW_SIZE <= inputs.forced_crew_size <= MAX_CREW_SIZE:
        issues.append(_issue(
            "forced_crew_size",
            f"Crew size must be between {MIN_CREW_SIZE} and {MAX_CREW_SIZE}",
            errors.INVALID_CREW_SIZE,
        ))

    issues.extend(_validate_handicaps("handicap_factors", inputs.handicap_factors))
    issues.extend(_validate_handicaps("destination_handicap_factors", inputs.destination_handicap_factors))

    if inputs.additional_trucks < 0:
        issues.append(_issue("additional_trucks", "Additional trucks cannot be negative", errors.INVALID_TRUCK_COUNT))

    for item in inputs.special_items:
        if item.price < 0 or item.quantity < 0:
            issues.append(_issue(
                "special_items",
                f"Special item {item.name} cannot have a negative price or quantity",
                errors.INVALID_SPECIAL_ITEMS,
            ))
    for item in inputs.specialty_items:
        if item.tier not in SPECIALTY_ITEM_TIERS or item.quantity < 0:
            issues.append(_issue(
                "specialty_items",
                f"Specialty item {item.name} needs a tier in {', '.join(SPECIALTY_ITEM_TIERS)} "
                f"and a non-negative quantity",
                errors.INVALID_SPECIAL_ITEMS,
            ))

    estimation = inputs.estimation
    if estimation is not None:
        if estimation.property_type or estimation.fixed_estimate_type:
            issues.extend(validate_estimation_inputs(estimation, prefix="estimation."))
        elif estimation.packing_intensity not in PACKING_INTENSITY_MULTIPLIERS:
            issues.append(_issue(
                "estimation.packing_intensity",
                f"Unknown packing intensity: {estimation.packing_intensity}",
                errors.INVALID_PACKING_INTENSITY,
            ))

    return issues
