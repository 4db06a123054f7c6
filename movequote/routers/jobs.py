"""
Job estimate endpoints: addresses in, routed distance + full quote out.

The distance provider comes from get_distance_provider so tests (and other
deployments) can swap it via app.dependency_overrides.
"""

from fastapi import APIRouter, Depends
from typing import Optional

from ..config import settings
from ..distance import DistanceProvider, GoogleRoutesProvider
from ..job_estimator import calculate_job_estimate, rerate_job_estimate
from ..schemas import JobEstimateParams, JobRerateRequest, PricingResult

router = APIRouter(prefix="/jobs", tags=["jobs"])


def get_distance_provider() -> Optional[DistanceProvider]:
    """Google Routes when a key is configured, otherwise None (fallbacks only)."""
    if not settings.GOOGLE_MAPS_API_KEY:
        return None
    return GoogleRoutesProvider()


@router.post("/estimate", response_model=PricingResult)
async def estimate_job(params: JobEstimateParams, provider=Depends(get_distance_provider)):
    return await calculate_job_estimate(params, provider)


@router.post("/rerate", response_model=PricingResult)
async def rerate_job(request: JobRerateRequest, provider=Depends(get_distance_provider)):
    return await rerate_job_estimate(request.params, request.existing, provider)
