"""
Shared test fixtures: test client, fake distance providers, sample inputs.
"""

import os
import pytest
from fastapi.testclient import TestClient

# Keep tests off the real routing API regardless of the developer's .env
os.environ["GOOGLE_MAPS_API_KEY"] = ""

from movequote.distance import DistanceProviderError, RouteLeg
from movequote.main import app
from movequote.routers.jobs import get_distance_provider


class FakeDistanceProvider:
    """Returns the same leg for every pair of stops and records the calls."""

    def __init__(self, miles: float = 10.0, minutes: float = 20.0, status: str = "OK"):
        self.miles = miles
        self.minutes = minutes
        self.status = status
        self.calls = []

    async def route(self, origin, destination):
        self.calls.append((origin.full_address, destination.full_address))
        return RouteLeg(distance_in_miles=self.miles, duration_in_minutes=self.minutes, status=self.status)


class FailingDistanceProvider:
    async def route(self, origin, destination):
        raise DistanceProviderError("routing service down")


@pytest.fixture
def fake_provider():
    return FakeDistanceProvider()


@pytest.fixture
def make_provider():
    """Factory for fakes with custom leg values."""
    return FakeDistanceProvider


@pytest.fixture
def failing_provider():
    return FailingDistanceProvider()


@pytest.fixture
def client(fake_provider):
    """FastAPI test client with the routing provider swapped for a fake."""
    app.dependency_overrides[get_distance_provider] = lambda: fake_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
