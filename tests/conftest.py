"""Shared fixtures and fakes for the tour planner tests."""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional, Sequence

import pytest

from tourplanner.config import GeocodingConfig, MapConfig
from tourplanner.domain.errors import WaypointSourceError
from tourplanner.domain.models import GeoPoint, LocationPoint, Suggestion, Waypoint


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock implementing the ``call_later`` contract."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: List[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        for timer in sorted(self.timers, key=lambda t: t.due):
            if timer.cancelled or timer.fired or timer.due > target:
                continue
            self.now = timer.due
            timer.fired = True
            timer.callback()
        self.now = target


class FakeAddressSearch:
    """AddressSearchPort double recording every query it receives."""

    def __init__(
        self,
        results: int = 3,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        self.results = results
        self.delay = delay
        self.error = error
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def lookup(self, query: str, country_codes: str, limit: int) -> List[Suggestion]:
        with self._lock:
            self.calls.append(query)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [
            Suggestion(
                id=f"{query}-{i}",
                label=f"{query} {i}",
                coords=GeoPoint(-33.9 + i / 100, 18.4),
            )
            for i in range(self.results)
        ]


class FakeWaypointSource:
    def __init__(self, waypoints: Sequence[Waypoint] = (), fail: bool = False) -> None:
        self.waypoints = list(waypoints)
        self.fail = fail

    def list_waypoints(self) -> Sequence[Waypoint]:
        if self.fail:
            raise WaypointSourceError("Network response was not ok", source="test")
        return self.waypoints


@pytest.fixture
def geo_config() -> GeocodingConfig:
    return GeocodingConfig(debounce_seconds=0.01, cache_ttl_seconds=None)


@pytest.fixture
def map_config() -> MapConfig:
    return MapConfig()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def brewery_a() -> Waypoint:
    return Waypoint(id="a", name="Brewery A", address="1 Main Rd", coords=GeoPoint(-33.8, 18.5))


@pytest.fixture
def brewery_b() -> Waypoint:
    return Waypoint(id="b", name="Brewery B", address="2 Long St", coords=GeoPoint(-33.7, 18.6))


@pytest.fixture
def brewery_c() -> Waypoint:
    return Waypoint(id="c", name="Brewery C", address="", coords=GeoPoint(-34.0, 19.0))


@pytest.fixture
def start() -> LocationPoint:
    return LocationPoint(address="Cape Town", coords=GeoPoint(-33.9, 18.4))


@pytest.fixture
def unresolved() -> LocationPoint:
    return LocationPoint.from_text("Somewhere")
