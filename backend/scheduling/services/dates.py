"""
backend/scheduling/services/dates.py

Parsing of calendar dates, timestamps and time zones coming from callers.

Dates arrive as "YYYY-MM-DD" strings, `date` or `datetime` objects.
Timestamps arrive as ISO-8601 strings or `datetime` objects; naive values
are wall-clock time in the tenant's zone.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidRequest

UTC = timezone.utc


def parse_calendar_date(value: date | datetime | str) -> date:
    """
    Normalize a calendar date, dropping any time-of-day.

    Raises:
        InvalidRequest: if the value is not a date or a YYYY-MM-DD string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidRequest(f"Date must be in YYYY-MM-DD format, got {value!r}")


def resolve_timezone(name: str | ZoneInfo | None) -> ZoneInfo:
    """Look up an IANA time zone. Empty → UTC."""
    if isinstance(name, ZoneInfo):
        return name
    if not name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise InvalidRequest(f"Unknown time zone: {name!r}")


def parse_timestamp(value: datetime | str, tz: ZoneInfo) -> datetime:
    """
    Convert a timestamp to an aware datetime.

    Naive values are treated as wall-clock time in `tz`.

    Raises:
        InvalidRequest: if the value is not an ISO-8601 timestamp
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidRequest(f"Invalid timestamp: {value!r}")
    elif not isinstance(value, datetime):
        raise InvalidRequest(f"Invalid timestamp: {value!r}")

    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value
