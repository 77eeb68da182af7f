"""Shared fixtures: a fixed clock, a fresh store and a service bound to both."""

import pytest

from statusboard.config import Settings
from statusboard.service import AvailabilityService
from statusboard.store import InMemoryStatusStore
from tests.helpers import FixedClock, at


@pytest.fixture
def config():
    return Settings()


@pytest.fixture
def clock():
    return FixedClock(at("08:00"))


@pytest.fixture
def store():
    return InMemoryStatusStore()


@pytest.fixture
def service(store, config, clock):
    return AvailabilityService(store, config=config, clock=clock)
