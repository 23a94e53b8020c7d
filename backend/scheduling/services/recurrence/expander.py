# backend/scheduling/services/recurrence/expander.py
"""
Recurrence expansion.

expand_recurrence(start, rule) → ordered, duplicate-free list of dates.
The start date is always the first element; at most MAX_OCCURRENCES
dates are returned whatever the termination mode.

Arithmetic is done on `date` values only, so DST never shifts a day.
Past dates are not skipped: there is no notion of "now" here.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from math import ceil
from typing import Any, Iterator
from zoneinfo import ZoneInfo

from ..dates import UTC, parse_calendar_date, parse_timestamp, resolve_timezone
from ..errors import InvalidRequest
from .rules import (
    MAX_OCCURRENCES,
    WEEKDAYS,
    Frequency,
    MonthlyMode,
    RecurrenceRule,
    normalize_rule,
    sunday_based_weekday,
)

logger = logging.getLogger(__name__)


def expand_recurrence(start_date: date | datetime | str, rule: Any) -> list[date]:
    """
    Expand a recurrence rule into occurrence dates.

    Args:
        start_date: First occurrence; time-of-day is ignored
        rule: Wire dict, RecurrenceRule, or pydantic model (normalized leniently)

    Returns:
        Ordered list of dates starting with start_date.

    Raises:
        InvalidRequest: if start_date is not a date
    """
    start = parse_calendar_date(start_date)
    rule = normalize_rule(rule)

    limit = MAX_OCCURRENCES if rule.until is not None else min(rule.count, MAX_OCCURRENCES)

    occurrences = [start]
    for candidate in _candidates(start, rule):
        if len(occurrences) >= limit:
            break
        if rule.until is not None and candidate > rule.until:
            break
        occurrences.append(candidate)

    logger.debug(
        f"Expanded {rule.frequency.value} rule from {start.isoformat()} "
        f"to {len(occurrences)} occurrences"
    )
    return occurrences


def materialize_occurrences(
    start: datetime | str,
    end: datetime | str,
    rule: Any,
    tz: str | ZoneInfo | None = None,
) -> list[tuple[datetime, datetime]]:
    """
    Turn a recurring event into concrete (start, end) pairs.

    Each occurrence keeps the wall-clock start time of the first event in
    `tz` and its duration.

    Raises:
        InvalidRequest: malformed timestamps or end not after start
    """
    zone = resolve_timezone(tz)
    first_start = parse_timestamp(start, zone).astimezone(zone)
    first_end = parse_timestamp(end, zone).astimezone(zone)
    if first_end <= first_start:
        raise InvalidRequest("End time must be after start time")

    duration = first_end.astimezone(UTC) - first_start.astimezone(UTC)
    wall_clock = first_start.time()

    pairs = []
    for day in expand_recurrence(first_start.date(), rule):
        occ_start = datetime.combine(day, wall_clock, tzinfo=zone)
        occ_end = (occ_start.astimezone(UTC) + duration).astimezone(zone)
        pairs.append((occ_start, occ_end))
    return pairs


def weekday_ordinal(d: date) -> int:
    """Which occurrence of its weekday d is within the month (1..5)."""
    return ceil(d.day / 7)


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date | None:
    """
    The n-th given weekday (Python weekday, 0 = Monday) of a month.

    Returns None if the month has no such day (e.g. a fifth Tuesday).
    """
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    day = 1 + offset + (n - 1) * 7
    if day > calendar.monthrange(year, month)[1]:
        return None
    return date(year, month, day)


# ── Candidate generators ─────────────────────────────────────────────────
# Each yields dates strictly after start, ascending, and stops quietly
# when the calendar runs out (year 9999).


def _candidates(start: date, rule: RecurrenceRule) -> Iterator[date]:
    if rule.frequency == Frequency.DAILY:
        return _step_days(start, rule.interval)
    if rule.frequency == Frequency.WEEKDAY:
        return _weekdays(start)
    if rule.frequency == Frequency.WEEKLY:
        if rule.days_of_week:
            return _weekly_on_days(start, rule.interval, set(rule.days_of_week))
        return _step_days(start, 7 * rule.interval)
    if rule.frequency == Frequency.MONTHLY:
        if rule.monthly_mode == MonthlyMode.DAY_OF_WEEK:
            return _monthly_nth_weekday(start, rule.interval)
        return _monthly_day(start, rule.interval)
    return _yearly(start, rule.interval)


def _step_days(start: date, days: int) -> Iterator[date]:
    current = start
    while True:
        try:
            current += timedelta(days=days)
        except OverflowError:
            return
        yield current


def _weekdays(start: date) -> Iterator[date]:
    for current in _step_days(start, 1):
        if sunday_based_weekday(current) in WEEKDAYS:
            yield current


def _weekly_on_days(start: date, interval: int, days: set[int]) -> Iterator[date]:
    """Selected weekdays of every interval-th week (weeks start on Monday)."""
    week_start = start - timedelta(days=start.weekday())
    last_week = (date.max - week_start).days // 7
    week = 0
    while week <= last_week:
        for offset in range(7):
            try:
                current = week_start + timedelta(days=week * 7 + offset)
            except OverflowError:
                return
            if current > start and sunday_based_weekday(current) in days:
                yield current
        week += interval


def _add_months(start: date, months: int) -> tuple[int, int]:
    index = start.month - 1 + months
    return start.year + index // 12, index % 12 + 1


def _monthly_day(start: date, interval: int) -> Iterator[date]:
    """Same day-of-month every interval months; months without that day are skipped."""
    k = 1
    while True:
        year, month = _add_months(start, k * interval)
        if year > date.max.year:
            return
        if start.day <= calendar.monthrange(year, month)[1]:
            yield date(year, month, start.day)
        k += 1


def _monthly_nth_weekday(start: date, interval: int) -> Iterator[date]:
    """The start's weekday ordinal ("3rd Tuesday") every interval months."""
    n = weekday_ordinal(start)
    weekday = start.weekday()
    k = 1
    while True:
        year, month = _add_months(start, k * interval)
        if year > date.max.year:
            return
        current = nth_weekday_of_month(year, month, weekday, n)
        if current is not None:
            yield current
        k += 1


def _yearly(start: date, interval: int) -> Iterator[date]:
    """Same month and day every interval years; Feb 29 only in leap years."""
    k = 1
    while True:
        year = start.year + k * interval
        if year > date.max.year:
            return
        if start.month != 2 or start.day != 29 or calendar.isleap(year):
            yield date(year, start.month, start.day)
        k += 1
