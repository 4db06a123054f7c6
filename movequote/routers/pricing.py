"""Pricing endpoints. The caller already knows the distance."""

from fastapi import APIRouter
from pydantic import BaseModel

from ..pricing_engine import calculate_pricing, calculate_quick_price, get_pricing_breakdown, rerate_pricing
from ..schemas import PricingBreakdown, PricingInputs, PricingResult, QuickPrice, RerateRequest

router = APIRouter(prefix="/pricing", tags=["pricing"])


class QuickPriceRequest(BaseModel):
    move_size: str
    service_tier: str
    service_type: str
    distance_miles: float = 0.0


@router.post("", response_model=PricingResult)
def price(inputs: PricingInputs):
    return calculate_pricing(inputs)


@router.post("/quick", response_model=QuickPrice)
def quick_price(request: QuickPriceRequest):
    return calculate_quick_price(request.move_size, request.service_tier, request.service_type, request.distance_miles)


@router.post("/breakdown", response_model=PricingBreakdown)
def breakdown(inputs: PricingInputs):
    return get_pricing_breakdown(inputs)


@router.post("/rerate", response_model=PricingResult)
def rerate(request: RerateRequest):
    return rerate_pricing(request.inputs, request.existing)
