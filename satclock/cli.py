# satclock/cli.py

from __future__ import annotations
import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Any, List

from satclock.config import load_settings
from satclock.engine.broadcaster import WorkerBroadcaster
from satclock.engine.clock_source import ManualClockSource, SystemClockSource
from satclock.engine.display import RecordingDisplay
from satclock.engine.event_bus import EventBus
from satclock.engine.frame_loop import FrameLoop
from satclock.engine.playback import PlaybackRunner
from satclock.engine.time_manager import TimeManager
from satclock.logging_config import setup_logging
from satclock.output.formatter import EventFormatter
from satclock.output.notifier import Notifier
from satclock.output.url_state import UrlStateManager
from satclock.workers.cruncher import OrbitPathWorker, PositionCruncher, circular_orbit


DEMO_ELEMENTS = [
    {"name": "LEO-1", "radius_km": 6778.0, "period_min": 92.0},
    {"name": "MEO-1", "radius_km": 26560.0, "period_min": 718.0},
]


def main(argv: list[str] | None = None) -> int | None:
    parser = argparse.ArgumentParser(
        prog="satclock.cli",
        description="Play a clock-control script against the satellite tracker time authority",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "script",
        type=Path,
        help="Path to the playback script YAML file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional settings YAML file",
    )
    parser.add_argument(
        "--output",
        choices=["cli", "json"],
        default="cli",
        help="Output mode: 'cli' prints lines to stdout; 'json' dumps events to a JSON file",
    )
    parser.add_argument(
        "--json-file",
        type=Path,
        default=Path("clock_output.json"),
        help="Path to JSON output file if --output=json",
    )
    parser.add_argument(
        "--no-workers",
        action="store_true",
        help="Do not attach the demo position and orbit workers",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Include script action lines (SCRIPT: ...) in the output",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    if not args.script.exists():
        print(f"Playback script not found: {args.script}", file=sys.stderr)
        return 1

    try:
        settings = load_settings(args.config)
    except Exception as exc:
        print(f"Failed to load settings: {exc}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or settings.log_level, settings.log_format)

    # Composition root: the wall clock starts at the real time, then the
    # script drives it by hand
    clock_source = ManualClockSource(SystemClockSource().now_ms())
    event_bus = EventBus()
    broadcaster = WorkerBroadcaster()
    display = RecordingDisplay()
    url_state = UrlStateManager(settings.base_url)
    formatter = EventFormatter()

    cruncher = PositionCruncher(circular_orbit, DEMO_ELEMENTS)
    orbit_worker = OrbitPathWorker(circular_orbit, DEMO_ELEMENTS)
    if not args.no_workers:
        broadcaster.register("position_cruncher", cruncher)
        broadcaster.register("orbit_worker", orbit_worker)

    time_manager = TimeManager(
        clock_source,
        broadcaster=broadcaster,
        display_sink=display,
        url_state=url_state,
        notifier=Notifier(event_bus),
        event_bus=event_bus,
        settings=settings,
    )

    transformed_lines: List[str] = []
    transformed_events: List[dict[str, Any]] = []

    def handle_event(event: dict[str, Any]) -> None:
        for line in formatter.transform(event):
            if not line:
                continue

            if not args.verbose and line.startswith("SCRIPT:"):
                continue

            transformed_lines.append(line)
            transformed_events.append({"line": line, "event": event})

            if args.output == "cli":
                print(line)

    event_bus.subscribe(handle_event)

    frame_loop = FrameLoop(time_manager, clock_source)
    runner = PlaybackRunner(args.script, time_manager, frame_loop, event_bus)

    try:
        runner.load()
    except Exception as exc:
        print(f"Failed to load playback script: {exc}", file=sys.stderr)
        return 2

    try:
        time_manager.init()
        # The orbit worker comes up after the clock, as in the browser
        orbit_worker.start()
        time_manager.synchronize()
        runner.run()
    except Exception as exc:
        print(f"Playback failed: {exc}", file=sys.stderr)
        return 3

    summary = {
        "script_id": runner.script.get("id"),
        "frames": frame_loop.frames,
        "clock": time_manager.snapshot(),
        "url": url_state.url,
        "positions": cruncher.positions(clock_source.now_ms()) if not args.no_workers else [],
    }

    if args.output == "cli":
        print(f"FINAL {summary['clock']['simulation_date']} rate={time_manager.prop_rate:g}x")
        print(f"URL {summary['url']}")
    else:
        try:
            args.json_file.parent.mkdir(parents=True, exist_ok=True)
            with args.json_file.open("w", encoding="utf-8") as f:
                json.dump({"summary": summary, "events": transformed_events}, f, indent=2, default=str)
            print(f"Clock events dumped to {args.json_file}")
        except Exception as exc:
            print(f"Failed to write JSON file: {exc}", file=sys.stderr)
            return 4

    return 0


if __name__ == "__main__":

    signal.signal(signal.SIGPIPE, signal.SIG_DFL)  # Ignore broken pipe
    sys.exit(main())
