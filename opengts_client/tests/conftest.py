"""Shared pytest fixtures for OpenGTS client tests."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Generator, List

import pytest

from opengts_client import dispatcher as dispatcher_module
from opengts_client.schemas import Endpoint, Fix, Identity

COLLECTOR_BASE = "http://collector.test:8080/gprmc/Data"


class RecordingCallback:
    """Counts outcomes and signals once the first one arrives."""

    def __init__(self) -> None:
        self.completed = 0
        self.failed = 0
        self.events: List[str] = []
        self.fired = threading.Event()

    def on_complete(self) -> None:
        self.completed += 1
        self.events.append("complete")
        self.fired.set()

    def on_failure(self) -> None:
        self.failed += 1
        self.events.append("failure")
        self.fired.set()

    @property
    def total(self) -> int:
        return self.completed + self.failed


@pytest.fixture(autouse=True)
def _reset_default_dispatcher() -> Generator[None, None, None]:
    """Stop and forget the process-wide dispatcher between tests."""
    yield
    if dispatcher_module._default is not None:
        dispatcher_module._default.stop(drain=False, timeout=5)
        dispatcher_module._default = None


@pytest.fixture()
def callback() -> RecordingCallback:
    return RecordingCallback()


@pytest.fixture()
def endpoint() -> Endpoint:
    return Endpoint(host="collector.test", port=8080, path="/gprmc/Data")


@pytest.fixture()
def identity() -> Identity:
    return Identity(device_id="dev1")


@pytest.fixture()
def new_year_fix() -> Fix:
    """2021-01-01T00:00:00Z at 45N 73W, stationary."""
    return Fix.from_datetime(
        datetime(2021, 1, 1, tzinfo=timezone.utc),
        latitude=45.0,
        longitude=-73.0,
        altitude=10.0,
    )


@pytest.fixture()
def three_fixes() -> List[Fix]:
    base = 1_609_459_200_000  # 2021-01-01T00:00:00Z
    return [
        Fix(
            timestamp_ms=base + i * 1000,
            latitude=45.0 + i * 0.001,
            longitude=-73.0,
            altitude=10.0 + i,
            speed=1.5,
            bearing=90.0,
        )
        for i in range(3)
    ]


@pytest.fixture()
def make_callback():
    """Factory for extra ``RecordingCallback`` instances."""
    return RecordingCallback
