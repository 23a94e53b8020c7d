# backend/scheduling/services/slots/working_hours.py
"""
Tenant working hours.

Weekly schedule formats (both are stored by tenant settings):

Format A, named keys:
{
  "mon": {"start": "09:00", "end": "18:00"},
  "tue": [["09:00", "13:00"], ["14:00", "18:00"]],
  "sat": null,  // day off
  ...
}
Full names ("monday") are accepted as well.

Format B, numeric keys (0 = Monday, Python weekday):
{"0": [["09:00", "18:00"]], "1": [...], ...}

Date overrides replace the weekly hours for one date:
{"2024-12-31": [["10:00", "15:00"]], "2025-01-01": null}
An empty list or null closes the day. "10:00-15:00" strings are accepted
for single intervals.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from zoneinfo import ZoneInfo

from ..dates import parse_calendar_date, resolve_timezone
from ..errors import InvalidRequest
from .config import BookingConfig, get_booking_config, time_str_to_minutes

logger = logging.getLogger(__name__)

DAY_KEYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


@dataclass(frozen=True, order=True)
class OpenInterval:
    """Open hours of one day, in minutes since local midnight (end may be 1440)."""
    start_min: int
    end_min: int


@dataclass(frozen=True)
class WorkingHoursConfig:
    """
    Working hours and booking policy of a tenant.

    Attributes:
        timezone: IANA zone name; slot boundaries are wall-clock times there
        weekly: Python weekday (0 = Monday) → open intervals
        overrides: date → open intervals replacing the weekly ones (empty = closed)
        booking: slot step, notice, buffer, lookahead, duration bounds
    """
    timezone: str = "UTC"
    weekly: dict[int, tuple[OpenInterval, ...]] = field(default_factory=dict)
    overrides: dict[date, tuple[OpenInterval, ...]] = field(default_factory=dict)
    booking: BookingConfig = field(default_factory=get_booking_config)

    @property
    def tz(self) -> ZoneInfo:
        return resolve_timezone(self.timezone)

    def intervals_for(self, target_date: date) -> tuple[OpenInterval, ...]:
        """Open intervals for target_date, date overrides first."""
        if target_date in self.overrides:
            return self.overrides[target_date]
        return self.weekly.get(target_date.weekday(), ())

    @classmethod
    def from_schedule(
        cls,
        schedule: dict | str | None,
        timezone: str | None = None,
        overrides: dict | None = None,
        booking: BookingConfig | None = None,
    ) -> "WorkingHoursConfig":
        """
        Build a config from stored schedule data.

        Malformed day entries are skipped (the day is closed); an unknown
        time zone raises InvalidRequest.
        """
        if isinstance(schedule, str):
            try:
                schedule = json.loads(schedule) if schedule else {}
            except json.JSONDecodeError:
                logger.warning("Working hours schedule is not valid JSON, treating as closed")
                schedule = {}

        zone = timezone or "UTC"
        resolve_timezone(zone)

        weekly: dict[int, tuple[OpenInterval, ...]] = {}
        for weekday in range(7):
            raw = _get_day_value(schedule or {}, weekday)
            intervals = parse_day_intervals(raw)
            if intervals:
                weekly[weekday] = intervals

        parsed_overrides: dict[date, tuple[OpenInterval, ...]] = {}
        for key, raw in (overrides or {}).items():
            try:
                override_date = parse_calendar_date(key)
            except InvalidRequest:
                logger.warning(f"Skipping override with malformed date {key!r}")
                continue
            parsed_overrides[override_date] = parse_day_intervals(raw)

        return cls(
            timezone=zone,
            weekly=weekly,
            overrides=parsed_overrides,
            booking=booking or get_booking_config(),
        )


def parse_day_intervals(raw) -> tuple[OpenInterval, ...]:
    """
    Parse the open intervals of one day.

    Accepts None, {"start", "end"}, "HH:MM-HH:MM", or a list of
    [start, end] pairs / dicts / strings. Overlapping intervals are merged,
    the result is sorted.
    """
    if raw is None:
        return ()
    if isinstance(raw, (dict, str)):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        logger.warning(f"Skipping unrecognized day schedule {raw!r}")
        return ()

    intervals: list[OpenInterval] = []
    for item in raw:
        interval = _parse_interval(item)
        if interval is None:
            logger.warning(f"Skipping malformed working interval {item!r}")
            continue
        intervals.append(interval)

    return _merge_overlapping(sorted(intervals))


# ── Helpers ──────────────────────────────────────────────────────────────


def _get_day_value(schedule: dict, weekday: int):
    """Raw schedule value for a weekday (Format B, then Format A)."""
    weekday_str = str(weekday)
    if weekday_str in schedule:
        return schedule[weekday_str]
    if weekday in schedule:
        return schedule[weekday]
    for key in (DAY_KEYS[weekday], DAY_NAMES[weekday]):
        if key in schedule:
            return schedule[key]
    return None


def _parse_interval(item) -> OpenInterval | None:
    if isinstance(item, dict):
        start, end = item.get("start"), item.get("end")
    elif isinstance(item, str):
        parts = item.split("-")
        if len(parts) != 2:
            return None
        start, end = parts
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        start, end = item
    else:
        return None

    if not isinstance(start, str) or not isinstance(end, str):
        return None
    try:
        start_min = time_str_to_minutes(start)
        end_min = time_str_to_minutes(end)
    except ValueError:
        return None

    if start_min >= end_min:
        return None
    return OpenInterval(start_min, end_min)


def _merge_overlapping(intervals: list[OpenInterval]) -> tuple[OpenInterval, ...]:
    merged: list[OpenInterval] = []
    for interval in intervals:
        if merged and interval.start_min < merged[-1].end_min:
            last = merged[-1]
            merged[-1] = OpenInterval(last.start_min, max(last.end_min, interval.end_min))
        else:
            merged.append(interval)
    return tuple(merged)
