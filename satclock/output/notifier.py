# satclock/output/notifier.py
"""
User-facing notifications ("toasts").

The clock announces every propagation-rate change. How loudly depends on
how far the rate is from real time.
"""

import logging
from enum import Enum

from satclock.engine.event_bus import TOAST, EventBus

logger = logging.getLogger(__name__)


class ToastLevel(str, Enum):
    NORMAL = "normal"
    STANDBY = "standby"
    CAUTION = "caution"
    SERIOUS = "serious"


def rate_toast_level(rate: float) -> ToastLevel:
    """
    Pick the severity for a propagation-rate toast.

    Real time (within 1%) is normal, below 10x is standby, 10x to 60x is
    caution and 60x or faster is serious. Reverse rates use their
    magnitude.
    """
    magnitude = abs(rate)

    if 0.99 <= magnitude <= 1.01:
        return ToastLevel.NORMAL
    if magnitude < 10:
        return ToastLevel.STANDBY
    if magnitude < 60:
        return ToastLevel.CAUTION
    return ToastLevel.SERIOUS


def format_rate_toast(rate: float) -> str:
    return f"Propagation Speed: {rate:.1f}x"


class Notifier:
    """
    Collects toasts and forwards them to the event bus, if there is one.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.event_bus = event_bus
        self.last_toast: str | None = None
        self.history: list[tuple[str, ToastLevel]] = []

    def toast(self, text: str, level: ToastLevel = ToastLevel.NORMAL) -> None:
        self.last_toast = text
        self.history.append((text, level))
        logger.info("Toast [%s]: %s", level.value, text)

        if self.event_bus is not None:
            self.event_bus.publish(
                {"event_type": TOAST, "text": text, "level": level.value}
            )

    def rate_changed(self, rate: float) -> None:
        """
        Toast a new propagation rate at the matching severity.
        """
        self.toast(format_rate_toast(rate), rate_toast_level(rate))
