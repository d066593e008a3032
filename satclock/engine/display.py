"""
Display-side helpers for the simulation clock.

The clock decides when the on-screen date should change; a display sink
only renders what it is given. Formats are fixed width so the label does
not shift as digits change.
"""

from datetime import UTC, datetime
from typing import Protocol


class DisplaySink(Protocol):
    """
    Consumer of the rendered timestamp and current day of year.
    """

    def update(self, time_text: str, day_of_year: int) -> None: ...


def format_time_text(date: datetime) -> str:
    """
    Render a date as ``MM/DD/YY HH:MM:SS UTC``.
    """
    return date.astimezone(UTC).strftime("%m/%d/%y %H:%M:%S UTC")


def format_input_value(date: datetime) -> str:
    """
    Render a date as ``YYYY-MM-DD HH:MM:SS`` for a date/time input box.
    """
    return date.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S")


class RecordingDisplay:
    """
    Display sink that keeps every update it receives.
    """

    def __init__(self) -> None:
        self.updates: list[tuple[str, int]] = []

    def update(self, time_text: str, day_of_year: int) -> None:
        self.updates.append((time_text, day_of_year))

    @property
    def text(self) -> str | None:
        """
        The most recent time text, or None before the first update.
        """
        if not self.updates:
            return None
        return self.updates[-1][0]
