"""
Unit tests for satclock/output/formatter.py
"""

from satclock.engine.event_bus import (
    DISPLAY,
    PLAYBACK_ACTION,
    RATE_CHANGE,
    STATIC_OFFSET_CHANGE,
    TOAST,
    TOGGLE,
)
from satclock.output.formatter import EventFormatter

T0 = 1_700_000_000_000.0


def test_rate_change():
    lines = EventFormatter().transform(
        {"event_type": RATE_CHANGE, "prop_rate": 60.0, "previous_rate": 1.0, "simulation_time": T0}
    )
    assert lines == ["RATE 1x -> 60x at 2023-11-14T22:13:20+00:00"]


def test_static_offset_change():
    lines = EventFormatter().transform(
        {"event_type": STATIC_OFFSET_CHANGE, "static_offset": 86_400_000.0, "simulation_time": T0}
    )
    assert lines == ["JUMP offset=86400000ms now 2023-11-14T22:13:20+00:00"]


def test_toggle_display_toast_and_playback():
    formatter = EventFormatter()

    assert formatter.transform(
        {"event_type": TOGGLE, "prop_rate": 0.0, "label": "Start Clock"}
    ) == ["TOGGLE rate=0x button='Start Clock'"]
    assert formatter.transform(
        {"event_type": DISPLAY, "time_text": "11/14/23 22:13:20 UTC", "day_of_year": 318}
    ) == ["TIME 11/14/23 22:13:20 UTC (day 318)"]
    assert formatter.transform(
        {"event_type": TOAST, "text": "Propagation Speed: 60.0x", "level": "serious"}
    ) == ["TOAST [serious] Propagation Speed: 60.0x"]
    assert formatter.transform(
        {"event_type": PLAYBACK_ACTION, "t": 100, "entry": {"action": "toggle"}}
    ) == ["SCRIPT: t=100 toggle"]


def test_unknown_event_type():
    assert EventFormatter().transform({"event_type": "bgp.update"}) == []
    assert EventFormatter().transform({}) == []
