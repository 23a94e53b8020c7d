# backend/tests/test_working_hours.py
from datetime import date
import json

import pytest

from scheduling.services.errors import InvalidRequest
from scheduling.services.slots import BookingConfig, OpenInterval, WorkingHoursConfig, get_booking_config
from scheduling.services.slots.config import minutes_to_time_str, time_str_to_minutes
from scheduling.services.slots.working_hours import parse_day_intervals

TUESDAY = date(2024, 1, 2)


def test_named_keys_format():
    hours = WorkingHoursConfig.from_schedule({
        "tue": {"start": "09:00", "end": "18:00"},
        "wednesday": [["09:00", "12:00"], {"start": "13:00", "end": "17:00"}],
        "sat": None,
    })

    assert hours.intervals_for(TUESDAY) == (OpenInterval(540, 1080),)
    assert hours.intervals_for(date(2024, 1, 3)) == (OpenInterval(540, 720), OpenInterval(780, 1020))
    assert hours.intervals_for(date(2024, 1, 6)) == ()
    assert hours.intervals_for(date(2024, 1, 1)) == ()


def test_numeric_keys_are_python_weekdays():
    hours = WorkingHoursConfig.from_schedule({"1": [["09:00", "17:00"]]})

    assert hours.intervals_for(TUESDAY) == (OpenInterval(540, 1020),)


def test_schedule_can_be_json_text():
    hours = WorkingHoursConfig.from_schedule(json.dumps({"tue": [["10:00", "11:00"]]}))

    assert hours.intervals_for(TUESDAY) == (OpenInterval(600, 660),)
    assert WorkingHoursConfig.from_schedule("{broken").weekly == {}


def test_malformed_intervals_are_skipped():
    intervals = parse_day_intervals([
        ["09:00", "12:00"],
        ["bad"],
        ["18:00", "17:00"],
        ["25:00", "26:00"],
        {"start": "13:00"},
        42,
        "14:00-15:00",
    ])

    assert intervals == (OpenInterval(540, 720), OpenInterval(840, 900))


def test_overlapping_intervals_are_merged():
    intervals = parse_day_intervals([["11:00", "14:00"], ["09:00", "12:00"], ["14:00", "15:00"]])

    assert intervals == (OpenInterval(540, 840), OpenInterval(840, 900))


def test_end_of_day_close():
    assert parse_day_intervals("22:00-24:00") == (OpenInterval(1320, 1440),)


@pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "America", "../etc"])
def test_unknown_time_zone_is_rejected(zone):
    with pytest.raises(InvalidRequest):
        WorkingHoursConfig.from_schedule({}, timezone=zone)


def test_override_with_bad_date_is_skipped():
    hours = WorkingHoursConfig.from_schedule({}, overrides={"someday": None, "2024-01-02": ["09:00-10:00"]})

    assert list(hours.overrides) == [TUESDAY]


def test_time_string_helpers():
    assert time_str_to_minutes("09:30") == 570
    assert time_str_to_minutes("24:00") == 1440
    assert minutes_to_time_str(570) == "09:30"
    for bad in ("9", "24:30", "12:60", "ab:cd"):
        with pytest.raises(ValueError):
            time_str_to_minutes(bad)


def test_booking_config_validation():
    with pytest.raises(ValueError):
        BookingConfig(slot_step_minutes=0)
    with pytest.raises(ValueError):
        BookingConfig(buffer_minutes=-5)
    with pytest.raises(ValueError):
        BookingConfig(min_duration_minutes=90, max_duration_minutes=60)

    config = BookingConfig()
    assert config.accepts_duration(15) and config.accepts_duration(240)
    assert not config.accepts_duration(241)


def test_default_booking_config_comes_from_settings():
    config = get_booking_config()

    assert config is get_booking_config()
    assert config.min_duration_minutes == 15
    assert config.max_duration_minutes == 240
