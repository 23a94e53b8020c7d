# backend/scheduling/services/slots/intervals.py
"""
Occupied intervals: bookings, holds and external calendar busy blocks.

All sources are treated the same way, as opaque exclusion zones.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from ..dates import UTC, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class TimeInterval:
    """Half-open [start, end) interval between two aware datetimes."""
    start: datetime
    end: datetime

    def overlaps(self, other: "TimeInterval") -> bool:
        """Touching intervals do not overlap."""
        return self.start < other.end and other.start < self.end

    def expanded(self, minutes: int) -> "TimeInterval":
        """Interval grown by `minutes` on both sides."""
        pad = timedelta(minutes=minutes)
        return TimeInterval(self.start - pad, self.end + pad)

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


def to_interval(raw: Any, tz: ZoneInfo) -> TimeInterval | None:
    """
    Convert one occupied-interval record to a TimeInterval in UTC.

    Accepts TimeInterval, (start, end) pairs, dicts with start/end
    (or startTime/endTime), and objects with start/end attributes.
    Returns None for records with end <= start.

    Raises:
        InvalidRequest: if a timestamp is malformed
    """
    if isinstance(raw, TimeInterval):
        start, end = raw.start, raw.end
    elif isinstance(raw, dict):
        start = raw.get("start", raw.get("startTime"))
        end = raw.get("end", raw.get("endTime"))
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        start, end = raw
    else:
        start = getattr(raw, "start", None)
        end = getattr(raw, "end", None)

    start_dt = parse_timestamp(start, tz).astimezone(UTC)
    end_dt = parse_timestamp(end, tz).astimezone(UTC)
    if end_dt <= start_dt:
        return None
    return TimeInterval(start_dt, end_dt)


def normalize_intervals(raw_intervals: Iterable[Any] | None, tz: ZoneInfo) -> list[TimeInterval]:
    """Convert occupied-interval records, dropping empty ones. Sorted by start."""
    result: list[TimeInterval] = []
    for raw in raw_intervals or []:
        interval = to_interval(raw, tz)
        if interval is None:
            logger.debug(f"Ignoring empty occupied interval {raw!r}")
            continue
        result.append(interval)
    result.sort()
    return result


def merge_busy_intervals(*sources: Iterable[Any], tz: ZoneInfo = ZoneInfo("UTC")) -> list[TimeInterval]:
    """
    Union occupied intervals from several sources (internal bookings,
    connected calendars) and coalesce overlapping or touching ones.
    """
    combined: list[TimeInterval] = []
    for source in sources:
        combined.extend(normalize_intervals(source, tz))
    combined.sort()

    merged: list[TimeInterval] = []
    for interval in combined:
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = TimeInterval(last.start, max(last.end, interval.end))
        else:
            merged.append(interval)
    return merged


def conflicts(candidate: TimeInterval, occupied: Iterable[TimeInterval]) -> bool:
    """True if candidate overlaps any occupied interval."""
    return any(candidate.overlaps(interval) for interval in occupied)
