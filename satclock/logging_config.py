"""
Logging setup for satclock.

Library modules only ever call ``logging.getLogger(__name__)``; the
composition root calls setup_logging() once to decide where records go
and what they look like.

Formats:
    text: ``2024-03-01 12:00:00,000 INFO satclock.engine... message``
    json: one JSON object per line (python-json-logger)
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """
    Configure the root logger to write to stderr.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown -> INFO).
        fmt: "text" or "json".
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if fmt.lower() == "json":
        handler.setFormatter(JsonFormatter(TEXT_FORMAT, rename_fields={"levelname": "level"}))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger.addHandler(handler)
