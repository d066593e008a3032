"""
Unit tests for satclock/engine/broadcaster.py
"""

import logging
from unittest.mock import Mock

import pytest

from satclock.engine.broadcaster import SyncMessage, WorkerBroadcaster


def make_handle(ready=True):
    handle = Mock(spec=["post_message", "ready"])
    handle.ready = ready
    return handle


class TestSyncMessage:
    def test_wire_shape(self):
        message = SyncMessage(static_offset=-4000.0, dynamic_offset_epoch=1.5e12, prop_rate=60.0)

        assert message.to_dict() == {
            "type": "offset",
            "staticOffset": -4000.0,
            "dynamicOffsetEpoch": 1.5e12,
            "propRate": 60.0,
        }

    def test_is_immutable(self):
        message = SyncMessage(0.0, 0.0, 1.0)

        with pytest.raises(AttributeError):
            message.prop_rate = 2.0


class TestWorkerBroadcaster:
    def test_notify_delivers_to_every_ready_worker_in_order(self):
        broadcaster = WorkerBroadcaster()
        calls = []
        first = make_handle()
        first.post_message.side_effect = lambda m: calls.append("first")
        second = make_handle()
        second.post_message.side_effect = lambda m: calls.append("second")
        broadcaster.register("first", first)
        broadcaster.register("second", second)

        delivered = broadcaster.notify(SyncMessage(0.0, 10.0, 1.0))

        assert delivered == ["first", "second"]
        assert calls == ["first", "second"]

    def test_missing_handle_is_skipped(self, caplog):
        broadcaster = WorkerBroadcaster()
        cruncher = make_handle()
        broadcaster.register("position_cruncher", cruncher)
        broadcaster.register("orbit_worker")

        with caplog.at_level(logging.DEBUG, logger="satclock.engine.broadcaster"):
            delivered = broadcaster.notify(SyncMessage(0.0, 10.0, 1.0))

        assert delivered == ["position_cruncher"]
        assert "orbit_worker not constructed" in caplog.text

    def test_not_ready_handle_is_skipped(self):
        broadcaster = WorkerBroadcaster()
        handle = make_handle(ready=False)
        broadcaster.register("orbit_worker", handle)

        assert broadcaster.notify(SyncMessage(0.0, 10.0, 1.0)) == []
        handle.post_message.assert_not_called()

    def test_handle_without_ready_flag_counts_as_ready(self):
        broadcaster = WorkerBroadcaster()
        handle = Mock(spec=["post_message"])
        broadcaster.register("plain", handle)

        assert broadcaster.notify(SyncMessage(0.0, 10.0, 1.0)) == ["plain"]

    def test_attach_fills_a_registered_slot(self):
        broadcaster = WorkerBroadcaster()
        broadcaster.register("orbit_worker")
        handle = make_handle()

        broadcaster.attach("orbit_worker", handle)
        broadcaster.notify(SyncMessage(1.0, 2.0, 3.0))

        handle.post_message.assert_called_once()

    def test_attach_unknown_slot_raises(self):
        broadcaster = WorkerBroadcaster()

        with pytest.raises(KeyError):
            broadcaster.attach("nope", make_handle())

    def test_unregister(self):
        broadcaster = WorkerBroadcaster()
        broadcaster.register("a", make_handle())
        broadcaster.register("b", make_handle())

        broadcaster.unregister("a")
        broadcaster.unregister("missing")

        assert broadcaster.names == ["b"]

    def test_no_workers(self):
        assert WorkerBroadcaster().notify(SyncMessage(0.0, 0.0, 1.0)) == []

    def test_worker_errors_propagate(self):
        broadcaster = WorkerBroadcaster()
        handle = make_handle()
        handle.post_message.side_effect = RuntimeError("worker crashed")
        broadcaster.register("bad", handle)

        with pytest.raises(RuntimeError, match="worker crashed"):
            broadcaster.notify(SyncMessage(0.0, 0.0, 1.0))
