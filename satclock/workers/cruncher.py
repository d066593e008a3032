"""
Background workers that follow the simulation clock.

Workers never ask the clock what time it is. They keep their own copy of
the time mapping, refreshed by sync messages, and evaluate it against the
wall clock whenever they need a simulated instant. Orbital mechanics are
out of scope here: a worker is given an opaque ``propagate(date, element)``
callable and just feeds it the right time.
"""

import logging
import math
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from satclock.engine.broadcaster import OFFSET_MESSAGE
from satclock.engine.epoch import to_datetime
from satclock.engine.time_manager import compute_simulation_time

logger = logging.getLogger(__name__)

Propagator = Callable[[datetime, Any], Any]


class WorkerTimeMapping:
    """
    A worker's private view of the simulation clock.

    Until the first sync message arrives the mapping is real time.
    """

    def __init__(self) -> None:
        self.static_offset: float = 0.0
        self.dynamic_offset_epoch: float = 0.0
        self.prop_rate: float = 1.0
        self.synced: bool = False

    def apply(self, message: dict[str, Any]) -> bool:
        """
        Take the offsets from a sync message.

        Returns:
            False when the message is not an offset message.
        """
        if message.get("type") != OFFSET_MESSAGE:
            return False

        self.static_offset = message["staticOffset"]
        self.dynamic_offset_epoch = message["dynamicOffsetEpoch"]
        self.prop_rate = message["propRate"]
        self.synced = True
        return True

    def simulation_time(self, now_ms: float) -> float:
        return compute_simulation_time(
            self.dynamic_offset_epoch, self.static_offset, self.prop_rate, now_ms
        )


class PositionCruncher:
    """
    Computes positions for a catalog of elements at simulation time.
    """

    def __init__(
        self,
        propagate: Propagator,
        elements: Iterable[Any] = (),
        ready: bool = True,
    ) -> None:
        self.propagate = propagate
        self.elements = list(elements)
        self.ready = ready
        self.time = WorkerTimeMapping()
        self.messages_received: int = 0

    def post_message(self, message: dict[str, Any]) -> None:
        self.messages_received += 1
        if not self.time.apply(message):
            logger.debug("%s ignored message type %r", type(self).__name__, message.get("type"))

    def simulation_date(self, now_ms: float) -> datetime:
        return to_datetime(self.time.simulation_time(now_ms))

    def positions(self, now_ms: float) -> list[Any]:
        """
        Propagate every element to the simulated instant matching now_ms.
        """
        date = self.simulation_date(now_ms)
        return [self.propagate(date, element) for element in self.elements]


class OrbitPathWorker(PositionCruncher):
    """
    Builds orbit lines. Starts later than the cruncher, so it begins not
    ready and misses any sync sent before start().
    """

    def __init__(self, propagate: Propagator, elements: Iterable[Any] = ()) -> None:
        super().__init__(propagate, elements, ready=False)

    def start(self) -> None:
        self.ready = True

    def orbit_path(
        self,
        element: Any,
        now_ms: float,
        points: int = 60,
        span_ms: float = 5_400_000.0,
    ) -> list[Any]:
        """
        Sample one element over span_ms of simulated time from now.
        """
        start = self.time.simulation_time(now_ms)
        step = span_ms / max(points - 1, 1)
        return [self.propagate(to_datetime(start + i * step), element) for i in range(points)]


def circular_orbit(date: datetime, element: dict[str, float]) -> tuple[float, float, float]:
    """
    Toy propagator: a circular equatorial orbit.

    Args:
        date: Simulated instant.
        element: {"radius_km", "period_min", "epoch_ms"}.

    Returns:
        (x, y, z) in km.
    """
    elapsed_min = (date.timestamp() * 1000.0 - element.get("epoch_ms", 0.0)) / 60_000.0
    angle = 2 * math.pi * elapsed_min / element["period_min"]
    radius = element["radius_km"]
    return (radius * math.cos(angle), radius * math.sin(angle), 0.0)
