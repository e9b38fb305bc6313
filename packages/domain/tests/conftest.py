"""Shared fixtures: an in-memory service with readable ids and a ticking clock."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from ownership_domain import EnterpriseRegistry, OwnershipService, OwnershipSettings, OwnershipStore

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


class SequentialIds:
    """Id generator yielding id-1, id-2, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


class TickingClock:
    """Clock advancing one second per call, so timestamps are ordered."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def settings():
    return OwnershipSettings(_env_file=None, base_currency="USD", log_level="INFO")


@pytest.fixture
def store():
    return OwnershipStore()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def registry(store, clock):
    return EnterpriseRegistry(store, id_generator=SequentialIds("ent"), clock=clock)


@pytest.fixture
def service(store, clock, settings):
    return OwnershipService(store=store, id_generator=SequentialIds(), clock=clock, settings=settings)


@pytest.fixture
def cafe(service):
    """Enterprise with 100 shares at 10 each."""
    return service.create_enterprise("Cafe", 100, 10)
