"""
satclock: the simulation time authority of a 3D satellite tracker.

The package provides:
- TimeManager: wall-clock to simulation-time mapping with rate and jumps
- WorkerBroadcaster: fan-out of time-sync messages to background workers
- FrameLoop and PlaybackRunner: per-frame and scripted drivers
- EventBus: notification of clock changes to outer layers
"""

from satclock.engine.broadcaster import SyncMessage, WorkerBroadcaster
from satclock.engine.clock_source import ManualClockSource, SystemClockSource
from satclock.engine.event_bus import EventBus
from satclock.engine.frame_loop import FrameLoop
from satclock.engine.playback import PlaybackRunner
from satclock.engine.time_manager import TimeManager, compute_simulation_time
