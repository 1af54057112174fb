"""Shared fixtures: an in-memory host, a controllable clock, a router factory."""

from collections.abc import Callable
from typing import Any

import pytest

from waypoint.config import RouterConfig
from waypoint.location import MemoryLocation
from waypoint.router import Router
from waypoint.testing import MemoryHost, MemoryWidget


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def host() -> MemoryHost:
    return MemoryHost(widgets=[MemoryWidget("Menu"), MemoryWidget("Header")])


@pytest.fixture
def make_router(host: MemoryHost, clock: FakeClock) -> Callable[..., Router]:
    def factory(location: Any = None, **config: Any) -> Router:
        return Router(
            host,
            RouterConfig(**config),
            location=location if location is not None else MemoryLocation(),
            clock=clock,
        )

    return factory
