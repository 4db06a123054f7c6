"""
Job estimator: the async front of the pricing pipeline.

Resolves the distance through the job's stops (the only awaited step), turns
the first and last address into origin/destination handicaps, then hands off
to the synchronous pricing engine.
"""

import logging
from typing import Optional

from .distance import DistanceProvider, MoveDistance, resolve_move_distance
from .pricing_engine import calculate_pricing, rerate_pricing
from .schemas import Address, HandicapFactors, JobChargeData, JobEstimateParams, PricingInputs, PricingResult

logger = logging.getLogger(__name__)


def handicaps_for(address: Optional[Address]) -> Optional[HandicapFactors]:
    if address is None:
        return None
    return HandicapFactors(stairs=address.stairs, walk_feet=address.walk_distance, elevator=address.elevator)


def pricing_inputs_for_job(params: JobEstimateParams, distance: MoveDistance) -> PricingInputs:
    origin = params.addresses[0] if params.addresses else None
    destination = params.addresses[-1] if len(params.addresses) > 1 else None
    return PricingInputs(
        move_size=params.move_size,
        custom_cubic_feet=params.custom_cubic_feet,
        inventory=params.inventory,
        service_tier=params.service_tier,
        service_type=params.service_type,
        distance_miles=distance.distance_miles,
        travel_duration_minutes=distance.duration_minutes,
        handicap_factors=handicaps_for(origin) or HandicapFactors(),
        destination_handicap_factors=handicaps_for(destination),
        forced_crew_size=params.forced_crew_size,
        additional_trucks=params.additional_trucks,
        emergency_service=params.emergency_service,
        estimation=params.estimation,
        special_items=params.special_items,
        specialty_items=params.specialty_items,
    )


def _annotate(result: PricingResult, distance: MoveDistance) -> PricingResult:
    return result.model_copy(update={
        "warnings": distance.warnings + result.warnings,
        "distance_source": distance.source,
    })


async def calculate_job_estimate(params: JobEstimateParams,
                                 provider: Optional[DistanceProvider] = None) -> PricingResult:
    distance = await resolve_move_distance(params.addresses, provider)
    if distance.rough:
        logger.info("Job %s priced on a %s distance estimate", params.job_id, distance.source)
    result = calculate_pricing(pricing_inputs_for_job(params, distance), job_id=params.job_id)
    return _annotate(result, distance)


async def rerate_job_estimate(params: JobEstimateParams, existing: JobChargeData,
                              provider: Optional[DistanceProvider] = None) -> PricingResult:
    """Re-price a stored job after its inputs changed (e.g. an address fix), keeping overrides."""
    distance = await resolve_move_distance(params.addresses, provider)
    result = rerate_pricing(pricing_inputs_for_job(params, distance), existing)
    return _annotate(result, distance)
