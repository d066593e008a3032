"""
Event bus for the satclock time authority.

Clock changes (rate, jumps, pause/resume, display refreshes, toasts) are
announced on the bus so that outer layers can react without the clock
knowing who they are. The bus does not interpret events; it delivers them
to subscribers, either to all of them or only to those that asked for a
particular ``event_type``.
"""

from collections.abc import Callable
from typing import Any

Event = dict[str, Any]
Subscriber = Callable[[Event], None]

RATE_CHANGE = "clock.rate_change"
STATIC_OFFSET_CHANGE = "clock.static_offset_change"
TOGGLE = "clock.toggle"
DISPLAY = "clock.display"
TOAST = "clock.toast"
PLAYBACK_ACTION = "playback.action"


class EventBus:
    """
    Synchronous publish-subscribe bus.

    Subscribers are called in the order they were registered. Wildcard
    subscribers and typed subscribers share that order. If a subscriber
    raises, delivery stops and the error reaches the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[str | None, Subscriber]] = []
        self._closed: bool = False

    def subscribe(self, handler: Subscriber, event_type: str | None = None) -> None:
        """
        Register a handler for one event type, or for every event.
        """
        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed event bus")

        self._subscribers.append((event_type, handler))

    def unsubscribe(self, handler: Subscriber) -> None:
        self._subscribers = [
            (event_type, registered)
            for event_type, registered in self._subscribers
            if registered is not handler
        ]

    def publish(self, event: Event) -> None:
        """
        Deliver an event to every matching subscriber.
        """
        if self._closed:
            raise RuntimeError("Cannot publish to a closed event bus")

        event_type = event.get("event_type")
        for wanted, handler in list(self._subscribers):
            if wanted is None or wanted == event_type:
                handler(event)

    def close(self) -> None:
        """
        Close the bus. Later subscribe/publish calls raise RuntimeError.
        """
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
