"""
Runtime settings for satclock.

Settings come from three layers, later ones winning: the dataclass
defaults, an optional YAML file, and a couple of environment variables
for logging.
"""

import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

ENV_LOG_LEVEL = "SATCLOCK_LOG_LEVEL"
ENV_LOG_FORMAT = "SATCLOCK_LOG_FORMAT"


@dataclass(frozen=True)
class Settings:
    """
    Tunables for the clock, its display throttle and the CLI.
    """

    # Largest unexplained simulation-time step (ms) still shown on screen
    gap_threshold_ms: float = 300.0
    # Minimum wall-clock gap (ms) between display refreshes
    display_interval_ms: float = 500.0
    datetime_enabled: bool = True
    initial_rate: float = 1.0
    base_url: str = "https://keeptrack.space/"
    log_level: str = "INFO"
    log_format: str = "text"


def load_settings(path: Path | None = None) -> Settings:
    """
    Build Settings from an optional YAML file plus environment overrides.

    Raises:
        ValueError: if the file is not a mapping, names unknown keys or
            gives a non-finite initial_rate.
    """
    values: dict[str, Any] = {}

    if path is not None:
        with path.open("r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)

        if loaded is None:
            loaded = {}

        if not isinstance(loaded, dict):
            raise ValueError("Settings file must be a YAML mapping (dict)")

        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(loaded) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")

        values.update(loaded)

    settings = Settings(**values)

    rate = settings.initial_rate
    if not isinstance(rate, (int, float)) or not math.isfinite(rate):
        raise ValueError(f"'initial_rate' must be a finite number, got {rate!r}")

    env_level = os.getenv(ENV_LOG_LEVEL)
    if env_level:
        settings = replace(settings, log_level=env_level.upper())

    env_format = os.getenv(ENV_LOG_FORMAT)
    if env_format:
        settings = replace(settings, log_format=env_format.lower())

    return settings
