# backend/scheduling/services/slots/calculator.py
"""
Slot grid calculation for one tenant and one day.

Every candidate start is produced from the tenant's open intervals on the
configured step and then checked against:
  ✓ minimum notice (start >= now + min_notice)
  ✓ occupied intervals, with the buffer added on both sides of the slot
  ✓ lookahead window (date <= today + lookahead_days)

Boundaries are wall-clock times in the tenant's zone. Durations, buffers
and overlap are compared on absolute instants, so a slot crossing a DST
change still lasts exactly `duration_minutes`.

Does NOT contain:
✗ Loading schedules or bookings (callers pass them in)
✗ Commit-time locking (see availability.check_slot)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from ..dates import UTC, parse_calendar_date, parse_timestamp
from ..errors import InvalidRequest
from .config import minutes_to_time_str
from .intervals import TimeInterval, conflicts, normalize_intervals
from .working_hours import OpenInterval, WorkingHoursConfig

logger = logging.getLogger(__name__)

REASON_MIN_NOTICE = "min_notice"
REASON_CONFLICT = "conflict"
REASON_LOOKAHEAD = "lookahead"


@dataclass(frozen=True)
class Slot:
    """A candidate slot; start/end are aware datetimes in the tenant zone."""
    start: datetime
    end: datetime
    available: bool = True
    reason: str | None = None

    @property
    def time(self) -> str:
        """Local start time "HH:MM"."""
        return self.start.strftime("%H:%M")


def calculate_slot_grid(
    tenant_id: str,
    target_date: date | str,
    duration_minutes: int,
    working_hours: WorkingHoursConfig,
    occupied_intervals: Iterable[Any] | None,
    now: datetime | str,
) -> list[Slot]:
    """
    Calculate every candidate slot of a day with its availability.

    Returns:
        Chronological list of Slot. Empty list = closed day.

    Raises:
        InvalidRequest: malformed/past date or duration out of bounds
    """
    tz = working_hours.tz
    booking = working_hours.booking
    now_local = parse_timestamp(now, tz).astimezone(tz)
    day = validate_request(target_date, duration_minutes, working_hours, now_local)

    # Step 1: Open intervals of the day
    open_intervals = working_hours.intervals_for(day)
    if not open_intervals:
        logger.debug(f"Tenant {tenant_id} closed on {day.isoformat()}")
        return []

    occupied = normalize_intervals(occupied_intervals, tz)
    earliest = now_local.astimezone(UTC) + timedelta(minutes=booking.min_notice_minutes)
    last_day = now_local.date() + timedelta(days=booking.lookahead_days)

    # Step 2: Candidates, then filters in order
    slots: list[Slot] = []
    for interval in open_intervals:
        for start, end in _candidates(day, interval, duration_minutes, booking.slot_step_minutes, tz):
            reason = None
            if start < earliest:
                reason = REASON_MIN_NOTICE
            elif conflicts(TimeInterval(start, end).expanded(booking.buffer_minutes), occupied):
                reason = REASON_CONFLICT
            elif start.astimezone(tz).date() > last_day:
                reason = REASON_LOOKAHEAD

            slots.append(Slot(
                start=start.astimezone(tz),
                end=end.astimezone(tz),
                available=reason is None,
                reason=reason,
            ))

    return slots


def validate_request(
    target_date: date | str,
    duration_minutes: int,
    working_hours: WorkingHoursConfig,
    now_local: datetime,
) -> date:
    """Check date and duration before any computation. Returns the parsed date."""
    day = parse_calendar_date(target_date)

    if day < now_local.date():
        raise InvalidRequest("cannot get availability for past dates")

    booking = working_hours.booking
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidRequest(f"duration_minutes must be an integer, got {duration_minutes!r}")
    if not booking.accepts_duration(duration_minutes):
        raise InvalidRequest(
            f"duration_minutes must be between {booking.min_duration_minutes} "
            f"and {booking.max_duration_minutes}, got {duration_minutes}"
        )
    return day


# ── Helpers ──────────────────────────────────────────────────────────────


def _candidates(
    day: date,
    interval: OpenInterval,
    duration_minutes: int,
    step: int,
    tz: ZoneInfo,
):
    """
    Yield (start, end) UTC pairs for one open interval.

    Starts are on the step grid from the interval's opening; a slot fits
    while start + duration <= close. Wall-clock starts that do not exist
    (spring-forward gap) are skipped.
    """
    close = _wall_clock(day, interval.end_min, tz).astimezone(UTC)
    duration = timedelta(minutes=duration_minutes)

    t = interval.start_min
    while t < interval.end_min:
        local = _wall_clock(day, t, tz)
        t += step

        if not _exists(local):
            logger.debug(f"Skipping non-existent local time {day.isoformat()} {minutes_to_time_str(t - step)}")
            continue

        start = local.astimezone(UTC)
        end = start + duration
        if end > close:
            break
        yield start, end


def _wall_clock(day: date, minutes: int, tz: ZoneInfo) -> datetime:
    """Aware datetime for `minutes` after local midnight of `day` (1440 = next midnight)."""
    naive = datetime.combine(day, time.min) + timedelta(minutes=minutes)
    return naive.replace(tzinfo=tz)


def _exists(local: datetime) -> bool:
    """False for wall-clock times skipped by a DST transition."""
    round_trip = local.astimezone(UTC).astimezone(local.tzinfo)
    return round_trip.replace(tzinfo=None) == local.replace(tzinfo=None)
