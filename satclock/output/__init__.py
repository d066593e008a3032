"""
Outer collaborators of the clock: toasts, shareable URLs and log lines.
"""

from satclock.output.formatter import EventFormatter
from satclock.output.notifier import Notifier, ToastLevel, rate_toast_level
from satclock.output.url_state import UrlStateManager, parse_url

__all__ = [
    "EventFormatter",
    "Notifier",
    "ToastLevel",
    "rate_toast_level",
    "UrlStateManager",
    "parse_url",
]
