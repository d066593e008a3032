"""Test configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from satclock.config import Settings  # noqa: E402
from satclock.engine.broadcaster import WorkerBroadcaster  # noqa: E402
from satclock.engine.clock_source import ManualClockSource  # noqa: E402
from satclock.engine.display import RecordingDisplay  # noqa: E402
from satclock.engine.event_bus import EventBus  # noqa: E402
from satclock.engine.time_manager import TimeManager  # noqa: E402

# 2023-11-14T22:13:20Z
T0 = 1_700_000_000_000.0


@pytest.fixture
def t0() -> float:
    return T0


@pytest.fixture
def clock_source() -> ManualClockSource:
    """Manual wall clock parked at T0."""
    return ManualClockSource(T0)


@pytest.fixture
def worker() -> Mock:
    """A ready worker handle."""
    handle = Mock(spec=["post_message", "ready"])
    handle.ready = True
    return handle


@pytest.fixture
def broadcaster(worker) -> WorkerBroadcaster:
    bus = WorkerBroadcaster()
    bus.register("position_cruncher", worker)
    return bus


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def time_manager(clock_source, broadcaster, display, event_bus, settings) -> TimeManager:
    """An initialised clock running at real time from T0."""
    manager = TimeManager(
        clock_source,
        broadcaster=broadcaster,
        display_sink=display,
        event_bus=event_bus,
        settings=settings,
    )
    manager.init()
    return manager


@pytest.fixture
def bare_time_manager(clock_source) -> TimeManager:
    """An initialised clock with no collaborators at all."""
    manager = TimeManager(clock_source)
    manager.init()
    return manager


@pytest.fixture
def mock_event_bus(monkeypatch):
    """Mock EventBus for CLI tests."""
    mock_bus = Mock()
    monkeypatch.setattr("satclock.cli.EventBus", lambda: mock_bus)
    return mock_bus


@pytest.fixture
def clean_env(monkeypatch):
    """Remove satclock environment overrides."""
    monkeypatch.delenv("SATCLOCK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SATCLOCK_LOG_FORMAT", raising=False)
