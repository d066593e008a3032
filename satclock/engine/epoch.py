"""
Calendar and two-line-element epoch helpers.

A TLE epoch is a two-digit year followed by the day of the year with a
fractional part, e.g. ``24`` and ``061.50000000`` for noon on 1 March
2024. Everything here is pure and works in UTC; naive datetimes are
assumed to already be UTC.
"""

from datetime import UTC, datetime, timedelta

MS_PER_DAY = 86_400_000

# TLE two-digit years below this pivot belong to the 2000s
_TLE_YEAR_PIVOT = 57


def _as_utc(date: datetime) -> datetime:
    if date.tzinfo is None:
        return date.replace(tzinfo=UTC)
    return date.astimezone(UTC)


def is_leap_year(value: datetime | int) -> bool:
    """
    Return True when the (UTC) year of value is a Gregorian leap year.
    """
    year = value if isinstance(value, int) else _as_utc(value).year

    if year % 4 != 0:
        return False

    return year % 100 != 0 or year % 400 == 0


def day_of_year(date: datetime) -> int:
    """
    Return the 1-based UTC day of the year.
    """
    return _as_utc(date).timetuple().tm_yday


def date_from_day_of_year(year: int, day: int) -> datetime:
    """
    Return midnight UTC of the given 1-based day of the year.
    """
    return datetime(year, 1, 1, tzinfo=UTC) + timedelta(days=day - 1)


def compute_epoch(date: datetime) -> tuple[str, str]:
    """
    Encode a date as a TLE epoch.

    Args:
        date: The instant to encode.

    Returns:
        (two-digit year, day-of-year string). The day string carries eight
        decimal places and is zero-padded to twelve characters.
    """
    utc = _as_utc(date)
    midnight = utc.replace(hour=0, minute=0, second=0, microsecond=0)
    fraction = (utc - midnight) / timedelta(days=1)

    epoch_year = f"{utc.year % 100:02d}"
    epoch_day = f"{day_of_year(utc) + fraction:.8f}".zfill(12)

    return epoch_year, epoch_day


def epoch_to_datetime(epoch_year: str | int, epoch_day: str | float) -> datetime:
    """
    Decode a TLE epoch back into an aware UTC datetime.
    """
    year = int(epoch_year)
    year += 2000 if year < _TLE_YEAR_PIVOT else 1900

    day = float(epoch_day)
    whole_day = int(day)
    fraction_ms = round((day - whole_day) * MS_PER_DAY)

    return date_from_day_of_year(year, whole_day) + timedelta(milliseconds=fraction_ms)


def jday(
    year: int,
    mon: int,
    day: int,
    hr: int = 0,
    minute: int = 0,
    sec: float = 0.0,
) -> float:
    """
    Julian date of a UTC calendar instant (valid 1900-2100).
    """
    return (
        367.0 * year
        - int((7 * (year + int((mon + 9) / 12.0))) * 0.25)
        + int(275 * mon / 9.0)
        + day
        + 1721013.5
        + ((sec / 60.0 + minute) / 60.0 + hr) / 24.0
    )


def to_datetime(timestamp_ms: float) -> datetime:
    """
    Convert milliseconds since the Unix epoch to an aware UTC datetime.
    """
    return datetime(1970, 1, 1, tzinfo=UTC) + timedelta(milliseconds=timestamp_ms)


def to_timestamp_ms(date: datetime) -> float:
    """
    Convert a datetime to milliseconds since the Unix epoch.
    """
    return _as_utc(date).timestamp() * 1000.0
