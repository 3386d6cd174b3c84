"""Conversion between the user-facing local time format and UTC instants.

All user-facing times use a fixed +05:30 offset:

- point in time: ``DD-MM-YYYY H:MM AM|PM`` (e.g. ``10-02-2026 1:19 PM``)
- calendar day: ``DD-MM-YYYY``
"""
import re
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

LOCAL_OFFSET = timezone(timedelta(hours=5, minutes=30), "IST")

DATE_TIME_PATTERN = "DD-MM-YYYY H:MM AM|PM"
DATE_PATTERN = "DD-MM-YYYY"

DATE_TIME_REGEX = re.compile(
    r"([0-9]{2})-([0-9]{2})-([0-9]{4}) +([0-9]{1,2}):([0-9]{2}) +(AM|PM)", re.IGNORECASE
)
DATE_REGEX = re.compile(r"([0-9]{2})-([0-9]{2})-([0-9]{4})")


class DateRange(NamedTuple):
    """First and last second of a local calendar day, as UTC instants."""

    start: datetime
    end: datetime


def utc_now() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _local_to_utc(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> Optional[datetime]:
    try:
        local = datetime(year, month, day, hour, minute, second, tzinfo=LOCAL_OFFSET)
        return local.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def parse_local_instant(value: str) -> Optional[datetime]:
    """
    Parse a local ``DD-MM-YYYY H:MM AM|PM`` string into a UTC datetime.

    Args:
        value: Local time string

    Returns:
        Aware UTC datetime, or None if the string does not match the pattern
        or any field is out of range

    Examples:
        >>> parse_local_instant("10-02-2026 1:19 PM").isoformat()
        '2026-02-10T07:49:00+00:00'
        >>> parse_local_instant("10-13-2026 1:19 PM") is None
        True
    """
    if not isinstance(value, str):
        return None

    match = DATE_TIME_REGEX.fullmatch(value)
    if not match:
        return None

    day, month, year, hour_str, minute_str, period = match.groups()
    hour = int(hour_str)
    minute = int(minute_str)

    if not 1 <= hour <= 12 or minute > 59:
        return None

    # 12 AM is midnight, 12 PM is noon
    if period.upper() == "PM" and hour != 12:
        hour += 12
    elif period.upper() == "AM" and hour == 12:
        hour = 0

    return _local_to_utc(int(year), int(month), int(day), hour, minute)


def format_local_instant(value: datetime) -> str:
    """
    Render an instant in the local ``DD-MM-YYYY H:MM AM|PM`` format.

    Naive datetimes are taken to be UTC, which is how the database stores them.

    Examples:
        >>> from datetime import datetime, timezone
        >>> format_local_instant(datetime(2026, 2, 10, 7, 49, tzinfo=timezone.utc))
        '10-02-2026 1:19 PM'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(LOCAL_OFFSET)

    period = "PM" if local.hour >= 12 else "AM"
    hour = local.hour % 12 or 12

    return f"{local.day:02d}-{local.month:02d}-{local.year:04d} {hour}:{local.minute:02d} {period}"


def parse_local_date_range(value: str) -> Optional[DateRange]:
    """
    Parse a local ``DD-MM-YYYY`` day into its first and last second.

    Args:
        value: Local date string

    Returns:
        DateRange with 00:00:00 and 23:59:59 of that day as UTC instants,
        or None if the string is not a valid date

    Examples:
        >>> day = parse_local_date_range("10-01-2026")
        >>> day.start.isoformat(), day.end.isoformat()
        ('2026-01-09T18:30:00+00:00', '2026-01-10T18:29:59+00:00')
    """
    if not isinstance(value, str):
        return None

    match = DATE_REGEX.fullmatch(value)
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    start = _local_to_utc(year, month, day)
    if start is None:
        return None

    return DateRange(start=start, end=start + timedelta(hours=23, minutes=59, seconds=59))


def get_clock():
    """Dependency providing the clock used for "now" checks."""
    return utc_now
