"""Pytest configuration and fixtures for the test suite."""

from collections.abc import Generator

import pytest

from tests.test_utils import EventRecorder, ManualClock
from timerfactory.registry import TimerFactory


@pytest.fixture
def clock() -> ManualClock:
    """Provide a manually driven clock."""
    return ManualClock()


@pytest.fixture
def factory(clock: ManualClock) -> Generator[TimerFactory, None, None]:
    """Provide a timer factory running on the manual clock."""
    with TimerFactory(clock=clock) as timer_factory:
        yield timer_factory


@pytest.fixture
def recorder(factory: TimerFactory) -> EventRecorder:
    """Record the events raised by the factory."""
    return EventRecorder(factory)
