"""
Box & packing estimation endpoints.

Engine envelopes come back with HTTP 200 even when success is false; the
errors list carries field-level codes for the client to render.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Optional

from ..estimation_engine import (
    calculate_comprehensive_estimation, calculate_quick_estimation,
    get_estimation_breakdown, get_pricing_integration_data,
)
from ..schemas import (
    EstimationBreakdown, EstimationInputs, EstimationResult, PricingIntegrationData, QuickEstimation,
)

router = APIRouter(prefix="/estimation", tags=["estimation"])


class QuickEstimationRequest(BaseModel):
    property_type: Optional[str] = None
    bedrooms: Optional[int] = None
    packing_intensity: str = "Normal"


class PricingIntegrationRequest(BaseModel):
    inputs: EstimationInputs
    service_type: str


@router.post("", response_model=EstimationResult)
def estimate(inputs: EstimationInputs):
    return calculate_comprehensive_estimation(inputs)


@router.post("/quick", response_model=QuickEstimation)
def quick_estimate(request: QuickEstimationRequest):
    return calculate_quick_estimation(request.property_type, request.bedrooms, request.packing_intensity)


@router.post("/breakdown", response_model=EstimationBreakdown)
def breakdown(inputs: EstimationInputs):
    return get_estimation_breakdown(inputs)


@router.post("/pricing-integration", response_model=PricingIntegrationData)
def pricing_integration(request: PricingIntegrationRequest):
    return get_pricing_integration_data(request.inputs, request.service_type)
