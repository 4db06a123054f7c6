"""
Box & material estimator.

Two modes:
  fixed:    pre-tabulated allocation for studios, offices, storage units
  dynamic:  per-room allocations for a property's base rooms plus bedrooms,
             with optional per-room count overrides

Counts are scaled by packing intensity per box type and rounded UP
independently. Never round the pre-multiplier sum.
"""

import logging
import math
import re
from typing import Dict, Optional, Tuple

from ..errors import InvalidInput
from ..rounding import money
from ..schemas import BoxEstimate, EstimationInputs, MaterialCost, MaterialLine
from ..tables import (
    BOX_TYPES, PROPERTY_TYPES, ROOM_BOX_ALLOCATIONS, FIXED_ESTIMATES,
    PACKING_INTENSITY_MULTIPLIERS, MATERIAL_PRICES, BOX_MATERIAL_ITEMS,
    BOX_DISPLAY_NAMES, TV_RENTAL_RATE, RENTABLE_BOX_TYPES, BOX_COUNT_CREW_BANDS,
    FIXED_ESTIMATE_ROOM_COUNT,
)

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_INPUTS = EstimationInputs(property_type="Apartment", bedrooms=1, packing_intensity="Normal")


def empty_allocation() -> Dict[str, int]:
    return {box_type: 0 for box_type in BOX_TYPES}


def room_counts_for(property_type: str, bedrooms: int, custom_room_counts: Optional[dict] = None) -> Dict[str, int]:
    """
    Base rooms count once each, bedrooms count N times. Custom overrides
    replace individual counts; 0 removes the room entirely.
    """
    config = PROPERTY_TYPES.get(property_type)
    if config is None:
        raise InvalidInput(f"Unknown property type: {property_type}. Available: {list(PROPERTY_TYPES.keys())}")

    counts = {room: 1 for room in config["base_rooms"]}
    if bedrooms > 0:
        counts["Bedroom"] = bedrooms

    for room, count in (custom_room_counts or {}).items():
        if room not in ROOM_BOX_ALLOCATIONS:
            raise InvalidInput(f"Unknown room type: {room}")
        counts[room] = count

    return {room: count for room, count in counts.items() if count > 0}


def _sum_rooms(room_counts: Dict[str, int]) -> Dict[str, int]:
    totals = empty_allocation()
    for room, count in room_counts.items():
        for box_type, per_room in ROOM_BOX_ALLOCATIONS[room].items():
            totals[box_type] += per_room * count
    return totals


def apply_packing_intensity(boxes: Dict[str, int], packing_intensity: str) -> Dict[str, int]:
    multiplier = PACKING_INTENSITY_MULTIPLIERS.get(packing_intensity)
    if multiplier is None:
        raise InvalidInput(f"Unknown packing intensity: {packing_intensity}")
    # round() guards the ceiling against float noise on exact products
    return {box_type: math.ceil(round(count * multiplier, 9)) for box_type, count in boxes.items()}


def estimate_boxes(inputs: EstimationInputs) -> BoxEstimate:
    """Box counts for validated inputs. Raises InvalidInput on anything unknown."""
    multiplier = PACKING_INTENSITY_MULTIPLIERS.get(inputs.packing_intensity)
    if multiplier is None:
        raise InvalidInput(f"Unknown packing intensity: {inputs.packing_intensity}")

    if inputs.fixed_estimate_type:
        allocation = FIXED_ESTIMATES.get(inputs.fixed_estimate_type)
        if allocation is None:
            raise InvalidInput(f"Unknown fixed estimate type: {inputs.fixed_estimate_type}")
        base = dict(allocation)
        boxes = apply_packing_intensity(base, inputs.packing_intensity)
        return BoxEstimate(
            mode="fixed",
            estimate_type=inputs.fixed_estimate_type,
            packing_intensity=inputs.packing_intensity,
            intensity_multiplier=multiplier,
            room_counts={},
            room_count=FIXED_ESTIMATE_ROOM_COUNT,
            base_boxes=base,
            boxes=boxes,
            total_boxes=sum(boxes.values()),
        )

    if not inputs.property_type:
        raise InvalidInput("Either a property type or a fixed estimate type is required")

    bedrooms = 1 if inputs.bedrooms is None else inputs.bedrooms
    room_counts = room_counts_for(inputs.property_type, bedrooms, inputs.custom_room_counts)
    base = _sum_rooms(room_counts)
    boxes = apply_packing_intensity(base, inputs.packing_intensity)
    return BoxEstimate(
        mode="dynamic",
        estimate_type=inputs.property_type,
        bedrooms=bedrooms,
        packing_intensity=inputs.packing_intensity,
        intensity_multiplier=multiplier,
        room_counts=room_counts,
        room_count=sum(room_counts.values()),
        base_boxes=base,
        boxes=boxes,
        total_boxes=sum(boxes.values()),
    )


def estimate_boxes_or_default(inputs: Optional[EstimationInputs]) -> Tuple[BoxEstimate, list]:
    """
    Preview-path helper: with neither a property type nor a fixed type,
    estimate a one-bedroom apartment instead of failing.
    """
    if inputs is None or not (inputs.property_type or inputs.fixed_estimate_type):
        logger.warning("No property or fixed estimate type given, using default preview scenario")
        fallback = DEFAULT_PREVIEW_INPUTS
        if inputs is not None:
            fallback = fallback.model_copy(update={
                "packing_intensity": inputs.packing_intensity,
                "white_glove_service": inputs.white_glove_service,
            })
        return estimate_boxes(fallback), [
            "No property type specified: box estimate uses a 1 bedroom Apartment default"
        ]
    return estimate_boxes(inputs), []


def material_cost(boxes: Dict[str, int]) -> MaterialCost:
    """Purchase price for every box; TV boxes also carry a rental alternative."""
    lines = []
    purchase_total = 0.0
    rental_option_total = 0.0
    for box_type in BOX_TYPES:
        quantity = boxes.get(box_type, 0)
        if quantity <= 0:
            continue
        unit_price = MATERIAL_PRICES[BOX_MATERIAL_ITEMS[box_type]]
        line_total = quantity * unit_price
        purchase_total += line_total

        rental_price = rental_total = None
        if box_type in RENTABLE_BOX_TYPES:
            rental_price = money(unit_price * TV_RENTAL_RATE)
            # round() strips float noise before the half-up cent rounding
            rental_total = money(round(quantity * unit_price * TV_RENTAL_RATE, 9))
            rental_option_total += rental_total
        else:
            rental_option_total += line_total

        lines.append(MaterialLine(
            box_type=box_type,
            name=BOX_DISPLAY_NAMES.get(box_type, box_type),
            quantity=quantity,
            unit_price=unit_price,
            total=money(line_total),
            rental_price=rental_price,
            rental_total=rental_total,
        ))

    return MaterialCost(
        lines=lines,
        total=money(purchase_total),
        rental_option_total=money(rental_option_total),
        rental_savings=money(purchase_total - rental_option_total),
    )


def crew_size_for_boxes(total_boxes: int) -> int:
    """Crew recommendation keyed on box count. Independent of the cubic-feet bands."""
    for max_boxes, crew in BOX_COUNT_CREW_BANDS:
        if total_boxes <= max_boxes:
            return crew
    return BOX_COUNT_CREW_BANDS[-1][1]


_BEDROOMS_RE = re.compile(r"(\d+)\s+Bedroom")


def estimation_inputs_for_move_size(move_size: str, packing_intensity: str = "Normal",
                                    white_glove_service: bool = False) -> Optional[EstimationInputs]:
    """
    Map a move size onto box-estimation inputs.

    Fixed types map directly; "(Large)" houses → Large Home, apartments →
    Apartment, other houses → Normal Home. Returns None when no mapping exists.
    """
    if not move_size:
        return None
    if move_size in FIXED_ESTIMATES:
        return EstimationInputs(
            fixed_estimate_type=move_size,
            packing_intensity=packing_intensity,
            white_glove_service=white_glove_service,
        )

    match = _BEDROOMS_RE.search(move_size)
    bedrooms = int(match.group(1)) if match else 0
    if "(Large)" in move_size:
        property_type = "Large Home"
    elif "Apartment" in move_size:
        property_type = "Apartment"
    elif "House" in move_size:
        property_type = "Normal Home"
    else:
        return None

    config = PROPERTY_TYPES[property_type]
    bedrooms = min(max(bedrooms, config["min_bedrooms"]), config["max_bedrooms"])
    return EstimationInputs(
        property_type=property_type,
        bedrooms=bedrooms,
        packing_intensity=packing_intensity,
        white_glove_service=white_glove_service,
    )
