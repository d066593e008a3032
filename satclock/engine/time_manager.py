"""
Simulation time authority for the satellite tracker.

Every consumer of time (position workers, the orbit-path builder, the
on-screen clock) must agree on one simulated instant. The TimeManager
owns the mapping from wall-clock time to simulation time:

    simulation_time = epoch + static_offset + (now - epoch) * prop_rate

where ``epoch`` (dynamic_offset_epoch) is the wall-clock instant at which
the current playback segment started. With ``prop_rate == 0`` the clock is
frozen at ``epoch + static_offset``.

Whenever the rate or the static offset changes the segment is rebased so
the simulated instant does not jump, and the new mapping is broadcast to
the workers, which derive simulation time on their own.

The manager reads its ClockSource only in init() and
get_propagation_offset(), and never schedules itself. The frame loop
calls tick() once per frame with the wall-clock instant; rate and offset
changes act on the instant of the last tick.
"""

import logging
import math
from datetime import datetime
from typing import Any

from satclock.config import Settings
from satclock.engine import epoch as epoch_utils
from satclock.engine.broadcaster import SyncMessage, WorkerBroadcaster
from satclock.engine.clock_source import ClockSource
from satclock.engine.display import DisplaySink, format_input_value, format_time_text
from satclock.engine.event_bus import (
    DISPLAY,
    RATE_CHANGE,
    STATIC_OFFSET_CHANGE,
    TOGGLE,
    EventBus,
)

logger = logging.getLogger(__name__)


def compute_simulation_time(
    dynamic_offset_epoch: float,
    static_offset: float,
    prop_rate: float,
    now_ms: float,
) -> float:
    """
    Map a wall-clock instant to simulation time.

    Shared by the clock and by workers so both sides agree exactly.
    """
    if prop_rate == 0:
        return dynamic_offset_epoch + static_offset

    return dynamic_offset_epoch + static_offset + (now_ms - dynamic_offset_epoch) * prop_rate


class TimeManager:
    """
    The single, explicitly constructed simulation clock.

    Only the clock source is required. The broadcaster, display sink,
    URL-state manager, notifier and event bus are optional; when one is
    missing its side effect is skipped.
    """

    def __init__(
        self,
        clock_source: ClockSource,
        broadcaster: WorkerBroadcaster | None = None,
        display_sink: DisplaySink | None = None,
        url_state=None,
        notifier=None,
        event_bus: EventBus | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.clock_source = clock_source
        self.broadcaster = broadcaster
        self.display_sink = display_sink
        self.url_state = url_state
        self.notifier = notifier
        self.event_bus = event_bus
        self.settings = settings or Settings()

        self.dynamic_offset_epoch: float = 0.0
        self.static_offset: float = 0.0
        self.prop_rate: float = 1.0
        self.last_prop_rate: float = 1.0
        self.real_time: float = 0.0
        self.simulation_time: float = 0.0
        self.selected_date: datetime | None = None
        self.last_display_update_time: float = 0.0
        self.time_text: str = ""
        # Value for the date/time input box, taken from the selected date
        self.input_value: str = ""

        # Values seen by the previous tick, for the display jump check
        self.last_simulation_time: float = 0.0
        self.last_real_time: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle and per-frame update
    # ------------------------------------------------------------------

    def init(self) -> None:
        """
        Start the clock running at real time from the current wall clock.

        Calling init() again discards all previous state.
        """
        now = self.clock_source.now_ms()

        self.dynamic_offset_epoch = now
        self.static_offset = 0.0
        self.prop_rate = 1.0
        self.last_prop_rate = 1.0
        self.real_time = now
        self.simulation_time = now
        self.last_simulation_time = now
        self.last_real_time = now
        self.last_display_update_time = now
        self.time_text = ""
        self.input_value = ""

        self.set_selected_date(self.simulation_datetime)
        logger.info("Clock initialised at %s", self.simulation_datetime.isoformat())

        self.set_rate(self.settings.initial_rate)
        if self.prop_rate == 1.0:
            # set_rate changed nothing, so workers have not been synced yet
            self.synchronize()

    def tick(self, wall_clock_now: float | None) -> float:
        """
        Recompute simulation time for the given wall-clock instant.

        This is the only regular recomputation; it is driven by the frame
        loop. Passing None leaves the current simulation time untouched.

        Returns:
            The simulation time in ms.
        """
        if wall_clock_now is None:
            return self.simulation_time

        self.last_simulation_time = self.simulation_time
        self.last_real_time = self.real_time

        self.real_time = wall_clock_now
        self.simulation_time = compute_simulation_time(
            self.dynamic_offset_epoch, self.static_offset, self.prop_rate, wall_clock_now
        )
        return self.simulation_time

    set_now = tick

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def _rebase(self, now: float) -> None:
        # staticOffset must be captured before the epoch moves
        current = compute_simulation_time(
            self.dynamic_offset_epoch, self.static_offset, self.prop_rate, now
        )
        self.static_offset = current - now
        self.dynamic_offset_epoch = now

    def set_rate(self, new_rate: float) -> None:
        """
        Change the propagation rate without moving the simulated instant.

        0 freezes the clock, 1 is real time, larger values fast-forward and
        negative values run backwards. The change takes effect at the
        instant of the last tick. Setting the current rate again does
        nothing, so no redundant sync traffic is produced.
        """
        if new_rate == self.prop_rate:
            return

        if not math.isfinite(new_rate):
            logger.warning("Ignoring non-finite propagation rate %r", new_rate)
            return

        previous_rate = self.prop_rate
        now = self.real_time

        if new_rate == 0:
            self.last_prop_rate = previous_rate

        self._rebase(now)
        self.prop_rate = float(new_rate)
        self.simulation_time = compute_simulation_time(
            self.dynamic_offset_epoch, self.static_offset, self.prop_rate, now
        )
        # A rate change is continuous, so start the jump check afresh
        self.last_simulation_time = self.simulation_time
        self.last_real_time = now

        logger.info("Propagation rate %sx -> %sx", previous_rate, self.prop_rate)

        self.synchronize()
        self._publish(
            {
                "event_type": RATE_CHANGE,
                "prop_rate": self.prop_rate,
                "previous_rate": previous_rate,
                "simulation_time": self.simulation_time,
            }
        )
        self._update_url()

        if self.notifier is not None:
            self.notifier.rate_changed(self.prop_rate)

    def set_static_offset(self, offset_ms: float) -> None:
        """
        Jump simulation time by replacing the static offset.

        Used when the view has to move to a new epoch, e.g. after a fresh
        element set has been created for "now". Like set_rate, the jump is
        taken at the instant of the last tick.
        """
        if not math.isfinite(offset_ms):
            logger.warning("Ignoring non-finite static offset %r", offset_ms)
            return

        now = self.real_time

        self._rebase(now)
        self.static_offset = float(offset_ms)
        self.simulation_time = compute_simulation_time(
            self.dynamic_offset_epoch, self.static_offset, self.prop_rate, now
        )

        logger.info("Static offset set to %d ms", self.static_offset)

        self.synchronize()
        self._publish(
            {
                "event_type": STATIC_OFFSET_CHANGE,
                "static_offset": self.static_offset,
                "simulation_time": self.simulation_time,
            }
        )
        self._update_url()

    def toggle(self) -> float:
        """
        Pause a running clock, or resume a paused one at its old rate.

        Returns:
            The propagation rate after toggling.
        """
        if self.prop_rate == 0:
            self.set_rate(self.last_prop_rate)
        else:
            self.set_rate(0)

        self._publish(
            {
                "event_type": TOGGLE,
                "prop_rate": self.prop_rate,
                "label": "Start Clock" if self.is_frozen else "Pause Clock",
            }
        )
        return self.prop_rate

    def set_selected_date(self, date: datetime | None) -> None:
        """
        Record the viewing date and refresh the on-screen clock.

        None means "the current simulation time". The display is only
        refreshed when simulation time has moved as the rate predicts
        since the last tick. A call made between a static-offset jump and
        the next tick is therefore skipped; the frame loop always ticks
        before refreshing, so its refreshes show the new time at once.
        """
        self.selected_date = date if date is not None else self.simulation_datetime

        if not self.settings.datetime_enabled:
            return

        if not self._is_continuous():
            logger.debug("Simulation time jumped, skipping display refresh")
            return

        sim_date = self.simulation_datetime
        self.time_text = format_time_text(sim_date)
        self.input_value = format_input_value(self.selected_date)
        jday = epoch_utils.day_of_year(sim_date)

        if self.display_sink is not None:
            self.display_sink.update(self.time_text, jday)

        self._publish(
            {
                "event_type": DISPLAY,
                "time_text": self.time_text,
                "day_of_year": jday,
                "input_value": self.input_value,
            }
        )

    def refresh_display(self, real_time: float | None = None) -> bool:
        """
        Throttled display refresh, called by the frame loop.

        Returns:
            True when the display interval had elapsed and a refresh ran.
        """
        if real_time is None:
            real_time = self.real_time

        if real_time - self.last_display_update_time < self.settings.display_interval_ms:
            return False

        self.last_display_update_time = real_time
        self.set_selected_date(self.simulation_datetime)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_frozen(self) -> bool:
        return self.prop_rate == 0

    @property
    def simulation_datetime(self) -> datetime:
        return epoch_utils.to_datetime(self.simulation_time)

    def get_propagation_offset(self) -> float:
        """
        How far (ms) the selected date is from the real clock; 0 if unset.
        """
        if self.selected_date is None:
            return 0.0

        return epoch_utils.to_timestamp_ms(self.selected_date) - self.clock_source.now_ms()

    def get_offset_date(self, offset_ms: float) -> datetime:
        """
        Return simulation time shifted by offset_ms, without touching state.
        """
        return epoch_utils.to_datetime(self.simulation_time + offset_ms)

    get_offset_time_obj = get_offset_date

    @staticmethod
    def compute_epoch(date: datetime) -> tuple[str, str]:
        return epoch_utils.compute_epoch(date)

    def snapshot(self) -> dict[str, Any]:
        return {
            "simulation_time": self.simulation_time,
            "simulation_date": self.simulation_datetime.isoformat(),
            "prop_rate": self.prop_rate,
            "static_offset": self.static_offset,
            "dynamic_offset_epoch": self.dynamic_offset_epoch,
            "real_time": self.real_time,
        }

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def sync_message(self) -> SyncMessage:
        return SyncMessage(
            static_offset=self.static_offset,
            dynamic_offset_epoch=self.dynamic_offset_epoch,
            prop_rate=self.prop_rate,
        )

    def synchronize(self) -> list[str]:
        """
        Broadcast the current time mapping to every ready worker.
        """
        if self.broadcaster is None:
            return []

        delivered = self.broadcaster.notify(self.sync_message())
        logger.debug("Synchronised workers: %s", ", ".join(delivered) or "none")
        return delivered

    def _is_continuous(self) -> bool:
        expected = (self.real_time - self.last_real_time) * self.prop_rate
        actual = self.simulation_time - self.last_simulation_time
        return abs(actual - expected) < self.settings.gap_threshold_ms

    def _update_url(self) -> None:
        if self.url_state is not None:
            self.url_state.update_url(self)

    def _publish(self, event: dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event)
