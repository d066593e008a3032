"""
Synchronization broadcast to background workers.

Workers (the position cruncher, the orbit-path builder) run their own
copy of the time mapping and never poll the clock. Whenever the mapping
changes the clock hands a SyncMessage to the broadcaster, which forwards
it to every registered worker that is ready to receive it.

Delivery is fire-and-forget and at most once per change. A worker that is
missing or still starting up simply misses the message; it will pick up
the next one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

logger = logging.getLogger(__name__)

OFFSET_MESSAGE = "offset"


@dataclass(frozen=True)
class SyncMessage:
    """
    The (staticOffset, dynamicOffsetEpoch, propRate) triple workers need.
    """

    static_offset: float
    dynamic_offset_epoch: float
    prop_rate: float
    type: str = OFFSET_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        """
        Return the wire shape posted to worker handles.
        """
        return {
            "type": self.type,
            "staticOffset": self.static_offset,
            "dynamicOffsetEpoch": self.dynamic_offset_epoch,
            "propRate": self.prop_rate,
        }


class WorkerHandle(Protocol):
    def post_message(self, message: dict[str, Any]) -> None: ...


class WorkerBroadcaster:
    """
    Registry of worker handles, owned by the composition root.

    Names can be registered before their handle exists; the slot is then
    filled with attach() once the worker has been constructed.
    """

    def __init__(self) -> None:
        self._handles: dict[str, WorkerHandle | None] = {}

    def register(self, name: str, handle: WorkerHandle | None = None) -> None:
        """
        Register a worker slot, optionally with its handle.
        """
        self._handles[name] = handle

    def attach(self, name: str, handle: WorkerHandle) -> None:
        """
        Fill a previously registered slot.
        """
        if name not in self._handles:
            raise KeyError(f"Unknown worker slot: {name}")

        self._handles[name] = handle

    def unregister(self, name: str) -> None:
        self._handles.pop(name, None)

    @property
    def names(self) -> list[str]:
        return list(self._handles)

    def notify(self, message: SyncMessage) -> list[str]:
        """
        Post message to every ready worker.

        Returns:
            Names of the workers the message was delivered to.
        """
        payload = message.to_dict()
        delivered: list[str] = []

        for name, handle in self._handles.items():
            if handle is None:
                logger.debug("Worker %s not constructed, skipping sync", name)
                continue

            if getattr(handle, "ready", True) is False:
                logger.debug("Worker %s not ready, skipping sync", name)
                continue

            handle.post_message(payload)
            delivered.append(name)

        return delivered
