# backend/scheduling/services/recurrence/__init__.py
"""
Recurrence module: rule normalization, expansion into dates, labels.
"""

from .rules import MAX_OCCURRENCES, Frequency, MonthlyMode, RecurrenceRule, normalize_rule
from .expander import expand_recurrence, materialize_occurrences, nth_weekday_of_month
from .presets import Preset, build_presets, describe_rule

__all__ = [
    "MAX_OCCURRENCES",
    "Frequency",
    "MonthlyMode",
    "RecurrenceRule",
    "normalize_rule",
    "expand_recurrence",
    "materialize_occurrences",
    "nth_weekday_of_month",
    "Preset",
    "build_presets",
    "describe_rule",
]
