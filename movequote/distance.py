"""Move distance lookup with degraded fallbacks.

Provides a single entrypoint `resolve_move_distance(addresses, provider)` that
routes every consecutive pair of stops and sums the legs.

Tries the routing provider (Google Routes by default) first. On failure it
estimates from the numeric difference of the postal codes, and if those are
missing it assumes a fixed distance and drive time per stop. Every fallback
is logged and returned as a warning so a rough number is never presented as
a routed one.
"""

from dataclasses import dataclass, field
import logging
import re
from typing import List, Optional, Protocol

import httpx

from .config import settings
from .schemas import Address
from .tables import (
    METERS_PER_MILE, POSTAL_CODE_MILES_DIVISOR, POSTAL_CODE_FALLBACK_MPH,
    DEFAULT_STOP_MILES, DEFAULT_STOP_MINUTES,
)

logger = logging.getLogger(__name__)

ROUTES_FIELD_MASK = "routes.duration,routes.distanceMeters"

SOURCE_ROUTES = "routes"
SOURCE_POSTAL_CODE = "postal_code"
SOURCE_DEFAULT = "default"
SOURCE_NONE = "none"


class DistanceProviderError(Exception):
    """The routing provider could not produce a route."""


@dataclass
class RouteLeg:
    distance_in_miles: float
    duration_in_minutes: float
    status: str = "OK"


@dataclass
class MoveDistance:
    distance_miles: float
    duration_minutes: float
    source: str
    warnings: List[str] = field(default_factory=list)
    legs: List[RouteLeg] = field(default_factory=list)

    @property
    def rough(self) -> bool:
        return self.source in (SOURCE_POSTAL_CODE, SOURCE_DEFAULT)


class DistanceProvider(Protocol):
    async def route(self, origin: Address, destination: Address) -> RouteLeg:
        ...


class GoogleRoutesProvider:
    """Google Routes API computeRoutes, one request per leg."""

    def __init__(self, api_key: Optional[str] = None, url: Optional[str] = None,
                 timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.GOOGLE_MAPS_API_KEY if api_key is None else api_key
        self.url = url or settings.ROUTES_API_URL
        self.timeout = settings.DISTANCE_TIMEOUT_SECONDS if timeout is None else timeout
        self.transport = transport

    async def route(self, origin: Address, destination: Address) -> RouteLeg:
        if not self.api_key:
            raise DistanceProviderError("No routing API key configured")

        body = {
            "origin": {"address": origin.full_address},
            "destination": {"address": destination.full_address},
            "travelMode": "DRIVE",
            "units": "IMPERIAL",
        }
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": ROUTES_FIELD_MASK,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as http:
                res = await http.post(self.url, json=body, headers=headers)
                res.raise_for_status()
                data = res.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise DistanceProviderError(f"Routes API request failed: {exc}") from exc

        routes = data.get("routes") or []
        if not routes:
            raise DistanceProviderError("Routes API returned no routes")
        try:
            meters = float(routes[0]["distanceMeters"])
            seconds = float(str(routes[0]["duration"]).rstrip("s"))
        except (KeyError, TypeError, ValueError) as exc:
            raise DistanceProviderError(f"Malformed Routes API response: {exc}") from exc

        return RouteLeg(distance_in_miles=meters / METERS_PER_MILE, duration_in_minutes=seconds / 60)


_ZIP_RE = re.compile(r"\b(\d{5})(?:-\d{4})?\b")


def postal_code(address: Address) -> Optional[int]:
    """Five-digit ZIP from the zip field, else the last one in the address text."""
    if address.zip:
        match = _ZIP_RE.search(address.zip.strip())
        if match:
            return int(match.group(1))
    matches = _ZIP_RE.findall(address.full_address or "")
    return int(matches[-1]) if matches else None


def _postal_code_estimate(legs) -> Optional[MoveDistance]:
    miles = 0.0
    for origin, destination in legs:
        a, b = postal_code(origin), postal_code(destination)
        if a is None or b is None:
            return None
        miles += abs(a - b) / POSTAL_CODE_MILES_DIVISOR
    if miles <= 0:
        return None
    return MoveDistance(
        distance_miles=miles,
        duration_minutes=miles / POSTAL_CODE_FALLBACK_MPH * 60,
        source=SOURCE_POSTAL_CODE,
    )


def _default_estimate(stops: int) -> MoveDistance:
    return MoveDistance(
        distance_miles=float(stops * DEFAULT_STOP_MILES),
        duration_minutes=float(stops * DEFAULT_STOP_MINUTES),
        source=SOURCE_DEFAULT,
    )


async def resolve_move_distance(addresses: List[Address],
                                provider: Optional[DistanceProvider] = None) -> MoveDistance:
    """Total one-way distance and drive time through every stop, in order."""
    valid = [a for a in addresses if a.full_address and a.full_address.strip()]
    if len(valid) < 2:
        return MoveDistance(distance_miles=0.0, duration_minutes=0.0, source=SOURCE_NONE)

    legs = list(zip(valid, valid[1:]))
    warnings = []

    if provider is None:
        warnings.append("No routing provider configured: distance is an estimate")
        logger.warning("No routing provider configured, estimating distance")
    else:
        try:
            routed = []
            for origin, destination in legs:
                leg = await provider.route(origin, destination)
                if leg.status != "OK":
                    raise DistanceProviderError(f"Route status {leg.status}")
                routed.append(leg)
            return MoveDistance(
                distance_miles=sum(leg.distance_in_miles for leg in routed),
                duration_minutes=sum(leg.duration_in_minutes for leg in routed),
                source=SOURCE_ROUTES,
                legs=routed,
            )
        except Exception as exc:
            logger.warning("Routing provider failed: %s", exc)
            warnings.append(f"Routing provider unavailable ({exc}): distance is an estimate")

    estimate = _postal_code_estimate(legs)
    if estimate is not None:
        logger.warning("Using postal code distance estimate: %.1f mi", estimate.distance_miles)
        warnings.append(
            f"Distance estimated from postal codes: {estimate.distance_miles:.1f} miles"
        )
    else:
        estimate = _default_estimate(len(legs))
        logger.warning("Postal codes unavailable, using default %d mi per stop", DEFAULT_STOP_MILES)
        warnings.append(
            f"Distance unavailable: assuming {DEFAULT_STOP_MILES} miles and "
            f"{DEFAULT_STOP_MINUTES} minutes per stop"
        )
    estimate.warnings = warnings
    return estimate
