from satclock.workers.cruncher import (
    OrbitPathWorker,
    PositionCruncher,
    WorkerTimeMapping,
    circular_orbit,
)

__all__ = ["OrbitPathWorker", "PositionCruncher", "WorkerTimeMapping", "circular_orbit"]
