"""
Scripted playback for the simulation clock.

A playback script is a YAML timeline of clock controls applied at given
wall-clock offsets (ms) from the start of the run:

    id: "pause-resume"
    frame_ms: 16
    duration_ms: 6000
    timeline:
      - t: 1000
        action: set_rate
        rate: 0
      - t: 5000
        action: toggle

The runner drives a manual clock source frame by frame, so a run is
deterministic and independent of how fast the host is.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from satclock.engine.epoch import to_timestamp_ms
from satclock.engine.event_bus import PLAYBACK_ACTION, EventBus
from satclock.engine.frame_loop import FrameLoop
from satclock.engine.time_manager import TimeManager

logger = logging.getLogger(__name__)

ACTIONS = ("set_rate", "jump", "jump_to", "toggle", "select_date")
REQUIRED_FIELDS = {
    "set_rate": ("rate",),
    "jump": ("offset_ms",),
    "jump_to": ("date",),
    "toggle": (),
    "select_date": (),
}
DEFAULT_FRAME_MS = 16


def parse_date(value: Any) -> datetime:
    """
    Accept a YAML timestamp or an ISO 8601 string; naive means UTC.
    """
    if isinstance(value, datetime):
        date = value
    else:
        date = datetime.fromisoformat(str(value))

    if date.tzinfo is None:
        date = date.replace(tzinfo=UTC)
    return date


class PlaybackRunner:
    """
    Runs one playback script against a time manager.
    """

    def __init__(
        self,
        script_path: Path,
        time_manager: TimeManager,
        frame_loop: FrameLoop,
        event_bus: EventBus | None = None,
    ) -> None:
        self.script_path = script_path
        self.time_manager = time_manager
        self.frame_loop = frame_loop
        self.event_bus = event_bus
        self.script: dict[str, Any] = {}

    @property
    def clock_source(self):
        return self.frame_loop.clock_source

    def load(self) -> None:
        """
        Load the script YAML from disk and validate its structure.
        """
        with self.script_path.open("r", encoding="utf-8") as fh:
            self.script = yaml.safe_load(fh)

        if not isinstance(self.script, dict):
            raise ValueError("Playback script must be a YAML mapping (dict)")

        if "timeline" not in self.script:
            raise ValueError("Playback script is missing a 'timeline' section")

        if not isinstance(self.script["timeline"], list):
            raise ValueError("'timeline' must be a list of actions")

        frame_ms = self.script.get("frame_ms", DEFAULT_FRAME_MS)
        if not isinstance(frame_ms, (int, float)) or frame_ms <= 0:
            raise ValueError("'frame_ms' must be a positive number")

        for index, entry in enumerate(self.script["timeline"]):
            self._validate_entry(index, entry)

    @staticmethod
    def _validate_entry(index: int, entry: Any) -> None:
        if not isinstance(entry, dict):
            raise ValueError(f"Timeline entry {index} must be a mapping")

        action = entry.get("action")
        if action not in ACTIONS:
            raise ValueError(f"Timeline entry {index} has unknown action {action!r}")

        t = entry.get("t", 0)
        if not isinstance(t, (int, float)) or t < 0:
            raise ValueError(f"Timeline entry {index} needs a non-negative 't'")

        missing = [name for name in REQUIRED_FIELDS[action] if name not in entry]
        if missing:
            raise ValueError(
                f"Timeline entry {index} ({action}) is missing: {', '.join(missing)}"
            )

    @property
    def duration_ms(self) -> float:
        timeline = self.script.get("timeline", [])
        default = max((entry.get("t", 0) for entry in timeline), default=0)
        return self.script.get("duration_ms", default)

    def run(self) -> int:
        """
        Play the script from the clock source's current instant.

        Returns:
            Number of frames stepped.
        """
        frame_ms = self.script.get("frame_ms", DEFAULT_FRAME_MS)
        timeline = sorted(self.script.get("timeline", []), key=lambda e: e.get("t", 0))
        start = self.clock_source.now_ms()
        duration = self.duration_ms

        pending = 0
        elapsed = 0.0
        frames = 0

        while elapsed <= duration:
            while pending < len(timeline) and timeline[pending].get("t", 0) <= elapsed:
                entry = timeline[pending]
                at = start + entry.get("t", 0)
                # Tick first so the action takes effect at its own instant
                self.clock_source.set(at)
                self.time_manager.tick(at)
                self.apply(entry)
                pending += 1

            self.clock_source.set(start + elapsed)
            self.frame_loop.step(frame_ms if frames else 0.0)
            frames += 1
            elapsed += frame_ms

        logger.info(
            "Playback %s finished: %d frames, %d actions",
            self.script.get("id"),
            frames,
            pending,
        )
        return frames

    def apply(self, entry: dict[str, Any]) -> None:
        """
        Apply one timeline entry to the time manager.
        """
        action = entry["action"]
        manager = self.time_manager

        if action == "set_rate":
            manager.set_rate(float(entry["rate"]))
        elif action == "jump":
            manager.set_static_offset(float(entry["offset_ms"]))
        elif action == "jump_to":
            target = to_timestamp_ms(parse_date(entry["date"]))
            manager.set_static_offset(target - manager.real_time)
        elif action == "toggle":
            manager.toggle()
        elif action == "select_date":
            date = entry.get("date")
            manager.set_selected_date(parse_date(date) if date is not None else None)

        if self.event_bus is not None:
            self.event_bus.publish(
                {
                    "event_type": PLAYBACK_ACTION,
                    "script_id": self.script.get("id"),
                    "t": entry.get("t", 0),
                    "entry": entry,
                    "clock": manager.snapshot(),
                }
            )
