"""
Per-frame driver for the simulation clock.

In the browser this is the animation-frame callback; headless runs call
step() themselves. Each frame reads the wall clock exactly once, ticks
the time manager with it and then gives the throttled display refresh a
chance to run.
"""

from dataclasses import dataclass

from satclock.engine.clock_source import ClockSource
from satclock.engine.time_manager import TimeManager

# Lower bound on |rate| used when capping a frame's simulated step
MIN_RATE_FOR_DT = 0.001


def adjusted_dt(dt_ms: float, prop_rate: float) -> float:
    """
    Simulated seconds covered by a frame of dt_ms real milliseconds.

    A frame never advances the scene by more than one simulated second per
    unit of rate, which keeps animation stable after a stalled frame.
    """
    return min(dt_ms / 1000.0, 1.0 / max(prop_rate, MIN_RATE_FOR_DT)) * prop_rate


@dataclass(frozen=True)
class FrameResult:
    real_time: float
    simulation_time: float
    dt_adjusted: float
    display_refreshed: bool


class FrameLoop:
    """
    Calls TimeManager.tick() once per frame.
    """

    def __init__(self, time_manager: TimeManager, clock_source: ClockSource) -> None:
        self.time_manager = time_manager
        self.clock_source = clock_source
        self.frames: int = 0

    def step(self, dt_ms: float = 0.0) -> FrameResult:
        """
        Advance one frame.

        Args:
            dt_ms: Real time since the previous frame.
        """
        now = self.clock_source.now_ms()
        dt_sim = adjusted_dt(dt_ms, self.time_manager.prop_rate)

        simulation_time = self.time_manager.tick(now)
        refreshed = self.time_manager.refresh_display(now)

        self.frames += 1
        return FrameResult(now, simulation_time, dt_sim, refreshed)

    def run(self, frames: int, frame_ms: float) -> list[FrameResult]:
        """
        Run a fixed number of frames. The clock source must support advance().
        """
        results = []

        for _ in range(frames):
            self.clock_source.advance(frame_ms)
            results.append(self.step(frame_ms))

        return results
