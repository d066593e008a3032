# satclock/output/url_state.py
"""
Shareable-link state for the simulation clock.

After every rate or offset change the clock asks this collaborator to
refresh the link, so that opening it later restores the same simulated
date and playback rate.
"""

from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

URL_DATE_FORMAT = "%Y%m%d%H%M%S"


class UrlStateManager:
    """
    Keeps the current shareable URL in sync with the clock.
    """

    def __init__(self, base_url: str = "https://keeptrack.space/") -> None:
        self.base_url = base_url
        self.url: str = base_url
        self.history: list[str] = []

    def update_url(self, time_manager) -> str:
        """
        Rebuild the URL from the clock's simulated date and rate.
        """
        params: dict[str, Any] = {
            "date": time_manager.simulation_datetime.strftime(URL_DATE_FORMAT),
        }
        if time_manager.prop_rate != 1:
            params["rate"] = f"{time_manager.prop_rate:g}"

        scheme, netloc, path, _, fragment = urlsplit(self.base_url)
        self.url = urlunsplit((scheme, netloc, path, urlencode(params), fragment))
        self.history.append(self.url)
        return self.url


def parse_url(url: str) -> dict[str, Any]:
    """
    Read the clock state back out of a shareable URL.

    Returns:
        Dict with "date" (aware datetime or None) and "rate" (float).
    """
    query = parse_qs(urlsplit(url).query)

    date = None
    if "date" in query:
        date = datetime.strptime(query["date"][0], URL_DATE_FORMAT).replace(tzinfo=UTC)

    rate = float(query["rate"][0]) if "rate" in query else 1.0

    return {"date": date, "rate": rate}
