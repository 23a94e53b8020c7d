# backend/tests/test_recurrence_expander.py
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from scheduling.services.errors import InvalidRequest
from scheduling.services.recurrence import (
    MAX_OCCURRENCES,
    expand_recurrence,
    materialize_occurrences,
    nth_weekday_of_month,
)
from scheduling.services.recurrence.expander import weekday_ordinal


def _rule(frequency="daily", interval=1, count=None, on_date=None, **extra) -> dict:
    end = {"onDate": on_date} if on_date else {"afterOccurrences": count if count is not None else 10}
    return {"frequency": frequency, "interval": interval, "end": end, **extra}


@pytest.mark.parametrize("count, expected", [(1, 1), (10, 10), (52, 52), (53, 52), (500, 52)])
def test_after_occurrences_is_capped(count, expected):
    """afterOccurrences = N yields exactly min(N, 52) dates."""
    dates = expand_recurrence("2024-01-01", _rule(count=count))

    assert len(dates) == expected


@pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly", "weekday"])
def test_start_date_is_first_element(frequency):
    dates = expand_recurrence("2024-01-06", _rule(frequency, count=5))

    assert dates[0] == date(2024, 1, 6)
    assert dates == sorted(set(dates))


def test_start_date_kept_even_outside_weekday_filter():
    """Saturday start of a weekday series is still the first occurrence."""
    dates = expand_recurrence("2024-01-06", _rule("weekday", count=3))

    assert dates == [date(2024, 1, 6), date(2024, 1, 8), date(2024, 1, 9)]


def test_weekly_days_of_week_filter():
    """Monday/Wednesday series from Monday 2024-01-01."""
    dates = expand_recurrence("2024-01-01", _rule("weekly", count=20, daysOfWeek=[1, 3]))

    assert dates[:4] == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 8), date(2024, 1, 10)]
    assert all(d.weekday() in (0, 2) for d in dates)
    assert len(dates) == 20


def test_weekly_sunday_follows_monday_within_same_week():
    """Weeks start on Monday: a Sunday in the start week is included."""
    dates = expand_recurrence("2024-01-01", _rule("weekly", count=3, daysOfWeek=[0]))

    assert dates == [date(2024, 1, 1), date(2024, 1, 7), date(2024, 1, 14)]


def test_weekly_interval_skips_weeks():
    dates = expand_recurrence("2024-01-01", _rule("weekly", interval=2, count=3, daysOfWeek=[1]))

    assert dates == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]


def test_weekly_without_days_repeats_start_weekday():
    dates = expand_recurrence("2024-01-03", _rule("weekly", count=3))

    assert dates == [date(2024, 1, 3), date(2024, 1, 10), date(2024, 1, 17)]


def test_weekday_shorthand_never_yields_weekend():
    dates = expand_recurrence("2024-01-05", _rule("weekday", count=52))

    assert len(dates) == 52
    assert all(d.weekday() < 5 for d in dates)
    assert dates[1] == date(2024, 1, 8)


def test_weekday_ignores_interval():
    dates = expand_recurrence("2024-01-01", _rule("weekday", interval=5, count=3))

    assert dates == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]


def test_daily_interval():
    dates = expand_recurrence("2024-01-01", _rule("daily", interval=3, count=3))

    assert dates == [date(2024, 1, 1), date(2024, 1, 4), date(2024, 1, 7)]


def test_monthly_nth_weekday_keeps_ordinal():
    """2024-01-16 is the third Tuesday; every occurrence is a third Tuesday."""
    dates = expand_recurrence("2024-01-16", _rule("monthly", count=12, monthlyMode="dayOfWeek"))

    assert dates[:3] == [date(2024, 1, 16), date(2024, 2, 20), date(2024, 3, 19)]
    assert len(dates) == 12
    for d in dates:
        assert d.weekday() == 1
        assert weekday_ordinal(d) == 3


def test_monthly_fifth_weekday_skips_short_months():
    """2024-01-29 is the fifth Monday; February 2024 has none."""
    dates = expand_recurrence("2024-01-29", _rule("monthly", count=3, monthlyMode="dayOfWeek"))

    assert dates == [date(2024, 1, 29), date(2024, 4, 29), date(2024, 7, 29)]


def test_monthly_day_of_month_skips_months_without_that_day():
    dates = expand_recurrence("2024-01-31", _rule("monthly", count=4))

    assert dates == [date(2024, 1, 31), date(2024, 3, 31), date(2024, 5, 31), date(2024, 7, 31)]


def test_monthly_interval_crosses_year():
    dates = expand_recurrence("2024-11-15", _rule("monthly", interval=2, count=3))

    assert dates == [date(2024, 11, 15), date(2025, 1, 15), date(2025, 3, 15)]


def test_yearly_leap_day_only_in_leap_years():
    dates = expand_recurrence("2024-02-29", _rule("yearly", count=3))

    assert dates == [date(2024, 2, 29), date(2028, 2, 29), date(2032, 2, 29)]


def test_on_date_is_inclusive():
    dates = expand_recurrence("2024-01-01", _rule("daily", on_date="2024-01-05"))

    assert dates[-1] == date(2024, 1, 5)
    assert len(dates) == 5


def test_on_date_still_capped():
    dates = expand_recurrence("2024-01-01", _rule("daily", on_date="2030-01-01"))

    assert len(dates) == MAX_OCCURRENCES
    assert dates[-1] == date(2024, 2, 21)


def test_on_date_before_start_returns_start_only():
    dates = expand_recurrence("2024-01-10", _rule("daily", on_date="2024-01-01"))

    assert dates == [date(2024, 1, 10)]


def test_unknown_frequency_falls_back_to_weekly():
    dates = expand_recurrence("2024-01-01", _rule("fortnightly", interval=4, count=3))

    assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]


@pytest.mark.parametrize("interval", [0, -3, None, "abc"])
def test_non_positive_interval_defaults_to_one(interval):
    dates = expand_recurrence("2024-01-01", _rule("daily", interval=interval, count=3))

    assert dates == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]


def test_missing_rule_parts_do_not_raise():
    dates = expand_recurrence("2024-01-01", {})

    assert len(dates) == MAX_OCCURRENCES
    assert dates[1] == date(2024, 1, 8)


def test_time_of_day_is_ignored():
    dates = expand_recurrence(datetime(2024, 3, 9, 23, 30), _rule("daily", count=2))

    assert dates == [date(2024, 3, 9), date(2024, 3, 10)]


def test_past_dates_are_not_skipped():
    dates = expand_recurrence("1999-12-31", _rule("daily", count=2))

    assert dates == [date(1999, 12, 31), date(2000, 1, 1)]


def test_malformed_start_date_raises():
    with pytest.raises(InvalidRequest):
        expand_recurrence("01/02/2024", _rule())


def test_expansion_returns_fresh_list():
    first = expand_recurrence("2024-01-01", _rule(count=5))
    second = expand_recurrence("2024-01-01", _rule(count=5))

    assert first == second
    assert first is not second


def test_expansion_stops_at_end_of_calendar():
    dates = expand_recurrence("9998-01-01", _rule("yearly", count=10))

    assert dates == [date(9998, 1, 1), date(9999, 1, 1)]


@pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly"])
def test_huge_interval_runs_off_the_calendar(frequency):
    dates = expand_recurrence("2024-01-01", _rule(frequency, interval=10**9, count=3))

    assert dates == [date(2024, 1, 1)]


def test_huge_weekly_interval_with_days_keeps_first_week():
    dates = expand_recurrence("2024-01-01", _rule("weekly", interval=10**9, count=5, daysOfWeek=[1, 3]))

    assert dates == [date(2024, 1, 1), date(2024, 1, 3)]


def test_nth_weekday_of_month():
    assert nth_weekday_of_month(2024, 1, 1, 3) == date(2024, 1, 16)
    assert nth_weekday_of_month(2024, 2, 0, 5) is None


def test_materialize_keeps_wall_clock_across_dst():
    """Weekly 09:00 New York meeting keeps 09:00 after the March DST change."""
    tz = ZoneInfo("America/New_York")
    pairs = materialize_occurrences(
        "2024-03-08T09:00:00",
        "2024-03-08T10:00:00",
        _rule("weekly", count=3),
        tz="America/New_York",
    )

    assert [start.date() for start, _ in pairs] == [date(2024, 3, 8), date(2024, 3, 15), date(2024, 3, 22)]
    for start, end in pairs:
        assert start.tzinfo == tz
        assert (start.hour, start.minute) == (9, 0)
        assert (end.hour, end.minute) == (10, 0)
    assert pairs[0][0].utcoffset() != pairs[1][0].utcoffset()


def test_materialize_rejects_inverted_range():
    with pytest.raises(InvalidRequest):
        materialize_occurrences("2024-01-01T10:00:00Z", "2024-01-01T09:00:00Z", _rule())
