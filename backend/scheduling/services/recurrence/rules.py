# backend/scheduling/services/recurrence/rules.py
"""
Recurrence rules.

Wire format (camelCase, as stored with recurring events):
{
  "frequency": "daily" | "weekly" | "monthly" | "yearly" | "weekday",
  "interval": 1,
  "daysOfWeek": [1, 3],          // 0 = Sunday .. 6 = Saturday, weekly only
  "monthlyMode": "dayOfMonth" | "dayOfWeek",
  "end": {"afterOccurrences": 10} | {"onDate": "2024-06-30"}
}

Stored rules are never rejected: normalize_rule() maps anything malformed
to a safe default in one place.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

MAX_OCCURRENCES = 52

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
WEEKDAYS = frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY})


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    WEEKDAY = "weekday"  # Mon–Fri, daily stepping


class MonthlyMode(str, Enum):
    DAY_OF_MONTH = "dayOfMonth"
    DAY_OF_WEEK = "dayOfWeek"


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Normalized recurrence rule.

    Exactly one of `count` / `until` is set.
    """
    frequency: Frequency = Frequency.WEEKLY
    interval: int = 1
    days_of_week: tuple[int, ...] = ()
    monthly_mode: MonthlyMode = MonthlyMode.DAY_OF_MONTH
    count: int | None = MAX_OCCURRENCES
    until: date | None = None

    def to_wire(self) -> dict:
        """Serialize back to the camelCase wire format."""
        data: dict[str, Any] = {
            "frequency": self.frequency.value,
            "interval": self.interval,
        }
        if self.days_of_week:
            data["daysOfWeek"] = list(self.days_of_week)
        if self.frequency == Frequency.MONTHLY:
            data["monthlyMode"] = self.monthly_mode.value
        if self.until is not None:
            data["end"] = {"onDate": self.until.isoformat()}
        else:
            data["end"] = {"afterOccurrences": self.count}
        return data


def sunday_based_weekday(d: date) -> int:
    """Weekday index with 0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % 7


def normalize_rule(raw: Any) -> RecurrenceRule:
    """
    Build a validated rule from wire data, a RecurrenceRule, or None.

    Leniency policy:
      - unknown frequency → weekly, interval 1
      - interval < 1 or not an integer → 1; weekday frequency → 1
      - daysOfWeek outside 0..6 dropped, duplicates removed
      - no usable termination → afterOccurrences = 52
      - afterOccurrences < 1 → 1
      - unusable onDate → falls back to afterOccurrences
    """
    if isinstance(raw, RecurrenceRule):
        raw = {
            "frequency": raw.frequency,
            "interval": raw.interval,
            "daysOfWeek": raw.days_of_week,
            "monthlyMode": raw.monthly_mode,
            "end": {"afterOccurrences": raw.count, "onDate": raw.until},
        }
    elif hasattr(raw, "model_dump"):
        raw = raw.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(raw, dict):
        raw = {}

    frequency = _parse_frequency(raw.get("frequency"))
    if frequency is None:
        frequency, interval = Frequency.WEEKLY, 1
    elif frequency == Frequency.WEEKDAY:
        interval = 1
    else:
        interval = _coerce_int(raw.get("interval"))
        if interval is None or interval < 1:
            interval = 1

    days_of_week: tuple[int, ...] = ()
    if frequency == Frequency.WEEKLY:
        days_of_week = _parse_days(_get(raw, "daysOfWeek", "days_of_week"))

    monthly_mode = MonthlyMode.DAY_OF_MONTH
    if _parse_monthly_mode(_get(raw, "monthlyMode", "monthly_mode")) == MonthlyMode.DAY_OF_WEEK:
        monthly_mode = MonthlyMode.DAY_OF_WEEK

    count, until = _parse_end(raw.get("end"))

    return RecurrenceRule(
        frequency=frequency,
        interval=interval,
        days_of_week=days_of_week,
        monthly_mode=monthly_mode,
        count=count,
        until=until,
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _get(raw: dict, *keys: str):
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _parse_frequency(value: Any) -> Frequency | None:
    if isinstance(value, Frequency):
        return value
    if isinstance(value, str):
        try:
            return Frequency(value.strip().lower())
        except ValueError:
            return None
    return None


def _parse_monthly_mode(value: Any) -> MonthlyMode | None:
    if isinstance(value, MonthlyMode):
        return value
    if isinstance(value, str):
        for mode in MonthlyMode:
            if mode.value.lower() == value.strip().lower():
                return mode
    return None


def _parse_days(value: Any) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    days = set()
    for item in value:
        day = _coerce_int(item)
        if day is not None and SUNDAY <= day <= SATURDAY:
            days.add(day)
    return tuple(sorted(days))


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _parse_end(end: Any) -> tuple[int | None, date | None]:
    if not isinstance(end, dict):
        return MAX_OCCURRENCES, None

    until = _parse_date(_get(end, "onDate", "on_date"))
    if until is not None:
        return None, until

    count = _coerce_int(_get(end, "afterOccurrences", "after_occurrences"))
    if count is None:
        return MAX_OCCURRENCES, None
    return max(count, 1), None
