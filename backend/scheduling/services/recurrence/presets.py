# backend/scheduling/services/recurrence/presets.py
"""
Human-readable recurrence labels and the standard presets offered when a
recurring event is created.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..dates import parse_calendar_date
from .expander import weekday_ordinal
from .rules import (
    MAX_OCCURRENCES,
    Frequency,
    MonthlyMode,
    RecurrenceRule,
    normalize_rule,
    sunday_based_weekday,
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
ORDINALS = ["first", "second", "third", "fourth", "fifth"]


@dataclass(frozen=True)
class Preset:
    key: str
    label: str
    rule: RecurrenceRule


def ordinal(n: int) -> str:
    return ORDINALS[n - 1] if 1 <= n <= len(ORDINALS) else f"{n}th"


def build_presets(start_date: date | datetime | str) -> list[Preset]:
    """Standard recurrence choices for an event starting on start_date."""
    start = parse_calendar_date(start_date)
    day_name = DAY_NAMES[sunday_based_weekday(start)]
    month_name = MONTH_NAMES[start.month - 1]

    return [
        Preset("daily", "Daily", RecurrenceRule(Frequency.DAILY, count=52)),
        Preset(
            "weekly",
            f"Weekly on {day_name}",
            RecurrenceRule(Frequency.WEEKLY, days_of_week=(sunday_based_weekday(start),), count=52),
        ),
        Preset(
            "monthly_day",
            f"Monthly on day {start.day}",
            RecurrenceRule(Frequency.MONTHLY, monthly_mode=MonthlyMode.DAY_OF_MONTH, count=12),
        ),
        Preset(
            "monthly_weekday",
            f"Monthly on the {ordinal(weekday_ordinal(start))} {day_name}",
            RecurrenceRule(Frequency.MONTHLY, monthly_mode=MonthlyMode.DAY_OF_WEEK, count=12),
        ),
        Preset(
            "yearly",
            f"Annually on {month_name} {start.day}",
            RecurrenceRule(Frequency.YEARLY, count=5),
        ),
        Preset(
            "weekday",
            "Every weekday (Mon–Fri)",
            RecurrenceRule(Frequency.WEEKDAY, count=52),
        ),
    ]


def describe_rule(start_date: date | datetime | str, rule: Any) -> str:
    """
    Label for a rule, e.g. "Every 2 weeks on Monday, Wednesday, 10 times".
    """
    start = parse_calendar_date(start_date)
    rule = normalize_rule(rule)
    day_name = DAY_NAMES[sunday_based_weekday(start)]

    if rule.frequency == Frequency.WEEKDAY:
        label = "Every weekday (Mon–Fri)"
    elif rule.frequency == Frequency.DAILY:
        label = "Daily" if rule.interval == 1 else f"Every {rule.interval} days"
    elif rule.frequency == Frequency.WEEKLY:
        days = ", ".join(DAY_NAMES[d] for d in rule.days_of_week) or day_name
        prefix = "Weekly" if rule.interval == 1 else f"Every {rule.interval} weeks"
        label = f"{prefix} on {days}"
    elif rule.frequency == Frequency.MONTHLY:
        prefix = "Monthly" if rule.interval == 1 else f"Every {rule.interval} months"
        if rule.monthly_mode == MonthlyMode.DAY_OF_WEEK:
            label = f"{prefix} on the {ordinal(weekday_ordinal(start))} {day_name}"
        else:
            label = f"{prefix} on day {start.day}"
    else:
        prefix = "Annually" if rule.interval == 1 else f"Every {rule.interval} years"
        label = f"{prefix} on {MONTH_NAMES[start.month - 1]} {start.day}"

    if rule.until is not None:
        return f"{label}, until {rule.until.isoformat()}"
    return f"{label}, {min(rule.count, MAX_OCCURRENCES)} times"
