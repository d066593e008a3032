# satclock/output/formatter.py
"""
Turn clock events into printable log lines.
"""

from collections.abc import Callable
from typing import Any

from satclock.engine.epoch import to_datetime
from satclock.engine.event_bus import (
    DISPLAY,
    PLAYBACK_ACTION,
    RATE_CHANGE,
    STATIC_OFFSET_CHANGE,
    TOAST,
    TOGGLE,
)


def _sim_date(event: dict[str, Any]) -> str:
    return to_datetime(event["simulation_time"]).isoformat()


def _rate_change(event: dict[str, Any]) -> list[str]:
    return [
        f"RATE {event['previous_rate']:g}x -> {event['prop_rate']:g}x at {_sim_date(event)}"
    ]


def _static_offset(event: dict[str, Any]) -> list[str]:
    return [f"JUMP offset={event['static_offset']:.0f}ms now {_sim_date(event)}"]


def _toggle(event: dict[str, Any]) -> list[str]:
    return [f"TOGGLE rate={event['prop_rate']:g}x button='{event['label']}'"]


def _display(event: dict[str, Any]) -> list[str]:
    return [f"TIME {event['time_text']} (day {event['day_of_year']})"]


def _toast(event: dict[str, Any]) -> list[str]:
    return [f"TOAST [{event['level']}] {event['text']}"]


def _playback(event: dict[str, Any]) -> list[str]:
    return [f"SCRIPT: t={event['t']} {event['entry'].get('action')}"]


class EventFormatter:
    """Dispatch events to the formatter for their event_type."""

    def __init__(self) -> None:
        self.formatters: dict[str, Callable[[dict[str, Any]], list[str]]] = {
            RATE_CHANGE: _rate_change,
            STATIC_OFFSET_CHANGE: _static_offset,
            TOGGLE: _toggle,
            DISPLAY: _display,
            TOAST: _toast,
            PLAYBACK_ACTION: _playback,
        }

    def transform(self, event: dict[str, Any]) -> list[str]:
        formatter = self.formatters.get(event.get("event_type"))
        if formatter:
            return formatter(event)
        return []
