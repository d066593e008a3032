"""
Wall-clock sources for the satclock time authority.

Reading the real clock is the only impure step in the time model, so it
lives behind a single tiny interface. Production code uses the system
clock; tests and headless playback use a manual source that only moves
when told to.

All values are milliseconds since the Unix epoch.
"""

import time
from typing import Protocol


class ClockSource(Protocol):
    """Anything that can report the current wall-clock time in ms."""

    def now_ms(self) -> float: ...


class SystemClockSource:
    """
    Wall clock backed by the host system time.
    """

    def now_ms(self) -> float:
        return time.time() * 1000.0


class ManualClockSource:
    """
    A wall clock that only moves when told to.

    The source may move in either direction; it is a stand-in for the
    real clock, not a simulation clock.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now: float = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def set(self, now_ms: float) -> None:
        """
        Jump the source to an absolute wall-clock time.
        """
        self._now = float(now_ms)

    def advance(self, delta_ms: float) -> float:
        """
        Move the source forward by delta_ms and return the new time.
        """
        self._now += delta_ms
        return self._now
