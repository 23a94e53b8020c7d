# backend/scheduling/services/slots/availability.py
"""
Availability operations used by booking routes.

- generate_slots: bookable slots of a day
- check_slot: re-validation of a chosen slot at booking-commit time
- calculate_calendar: per-day slot counts over a date range

All functions are pure: schedules, occupied intervals and "now" are
passed in, nothing is cached between calls.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable

from ..dates import UTC, parse_calendar_date, parse_timestamp
from .calculator import Slot, calculate_slot_grid
from .working_hours import WorkingHoursConfig

logger = logging.getLogger(__name__)


class SlotCheck(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"  # valid slot, taken or too soon
    INVALID = "invalid"  # not a slot of that day


@dataclass(frozen=True)
class DayAvailability:
    """Status of a single day in the calendar."""
    date: date
    open_slots_count: int

    @property
    def has_slots(self) -> bool:
        return self.open_slots_count > 0


def generate_slots(
    tenant_id: str,
    target_date: date | str,
    duration_minutes: int,
    working_hours: WorkingHoursConfig,
    occupied_intervals: Iterable[Any] | None,
    now: datetime | str,
) -> list[Slot]:
    """
    Bookable slots for a tenant on a date.

    Returns:
        Chronological list of available Slot. Empty list when the tenant is
        closed, fully booked, or the duration fits no open interval.

    Raises:
        InvalidRequest: malformed/past date or duration out of bounds
    """
    grid = calculate_slot_grid(
        tenant_id, target_date, duration_minutes, working_hours, occupied_intervals, now
    )
    slots = [slot for slot in grid if slot.available]

    logger.debug(
        f"Tenant {tenant_id}: {len(slots)}/{len(grid)} slots available "
        f"on {target_date} for {duration_minutes} min"
    )
    return slots


def check_slot(
    tenant_id: str,
    start: datetime | str,
    end: datetime | str,
    working_hours: WorkingHoursConfig,
    occupied_intervals: Iterable[Any] | None,
    now: datetime | str,
) -> SlotCheck:
    """
    Re-validate a requested slot against fresh occupied intervals.

    Callers run this inside their per-tenant-per-date write serialisation
    right before committing a booking.

    Raises:
        InvalidRequest: malformed timestamps or a slot on a past date
    """
    tz = working_hours.tz
    start_dt = parse_timestamp(start, tz)
    end_dt = parse_timestamp(end, tz)

    duration = end_dt.astimezone(UTC) - start_dt.astimezone(UTC)
    duration_minutes, remainder = divmod(int(duration.total_seconds()), 60)
    if remainder or not working_hours.booking.accepts_duration(duration_minutes):
        logger.info(f"Tenant {tenant_id}: rejected slot {start_dt.isoformat()} with duration {duration}")
        return SlotCheck.INVALID

    target_date = start_dt.astimezone(tz).date()
    grid = calculate_slot_grid(
        tenant_id, target_date, duration_minutes, working_hours, occupied_intervals, now
    )

    for slot in grid:
        if slot.start == start_dt:
            if slot.available:
                return SlotCheck.AVAILABLE
            logger.info(f"Tenant {tenant_id}: slot {slot.start.isoformat()} no longer available ({slot.reason})")
            return SlotCheck.UNAVAILABLE

    return SlotCheck.INVALID


def calculate_calendar(
    tenant_id: str,
    duration_minutes: int,
    working_hours: WorkingHoursConfig,
    occupied_intervals: Iterable[Any] | None,
    now: datetime | str,
    start_date: date | str | None = None,
    end_date: date | str | None = None,
) -> tuple[date, date, list[DayAvailability]]:
    """
    Count available slots per day over a range.

    The range is clamped to [today, today + lookahead_days] in the tenant
    zone; missing bounds default to that window.

    Returns:
        (start_date, end_date, days) after clamping.
    """
    tz = working_hours.tz
    today = parse_timestamp(now, tz).astimezone(tz).date()
    horizon = today + timedelta(days=working_hours.booking.lookahead_days)

    start = parse_calendar_date(start_date) if start_date is not None else today
    end = parse_calendar_date(end_date) if end_date is not None else horizon

    if start < today:
        start = today
    if end > horizon:
        end = horizon
    if end < start:
        end = start

    # Occupied intervals are shared by every day of the range
    occupied = list(occupied_intervals or [])

    days = []
    for day in get_dates_in_range(start, end):
        slots = generate_slots(tenant_id, day, duration_minutes, working_hours, occupied, now)
        days.append(DayAvailability(date=day, open_slots_count=len(slots)))

    return start, end, days


def get_dates_in_range(date_start: date, date_end: date) -> list[date]:
    """
    Get list of dates in range [date_start, date_end].

    Bounds given in reverse order are swapped.
    """
    if date_start > date_end:
        date_start, date_end = date_end, date_start

    dates = []
    current = date_start
    while current <= date_end:
        dates.append(current)
        current += timedelta(days=1)

    return dates
