import pytest
from datetime import date, time

from gym_api.core.exceptions import ValidationError
from gym_api.core.timeutil import (
    format_minutes, hour_label, hour_slots, normalize_time, to_minutes, week_bounds
)


@pytest.mark.parametrize("raw", ["10:00 AM", "10:00", "10:00:00", "10am", "10 a.m.", " 10:00 am "])
def test_equivalent_spellings_share_minutes(raw):
    assert to_minutes(raw) == 600

def test_midnight_and_noon():
    assert to_minutes("12:00 AM") == 0
    assert to_minutes("12:00 PM") == 720
    assert to_minutes("11:59 PM") == 23 * 60 + 59

def test_time_objects_are_accepted():
    assert to_minutes(time(18, 30)) == 18 * 60 + 30

@pytest.mark.parametrize("raw", ["", "   ", "25:00", "10:75", "10:00:99", "10:00:60", "13:00 PM", "noon", None])
def test_bad_times_are_rejected(raw):
    with pytest.raises(ValidationError):
        to_minutes(raw)

def test_normalize_time_is_canonical():
    assert normalize_time("7:05 pm") == "19:05"
    assert normalize_time("07:05") == "07:05"
    assert format_minutes(0) == "00:00"

def test_hour_labels_match_dashboard():
    assert hour_label(0) == "12:00 AM"
    assert hour_label(9) == "9:00 AM"
    assert hour_label(12) == "12:00 PM"
    assert hour_label(23) == "11:00 PM"
    slots = hour_slots()
    assert len(slots) == 24
    assert slots[0] == (0, "12:00 AM")

def test_week_starts_on_monday():
    # 2024-05-01 is a Wednesday
    start, end = week_bounds(date(2024, 5, 1))
    assert start == date(2024, 4, 29)
    assert end == date(2024, 5, 5)

def test_week_bounds_for_sunday_start():
    start, end = week_bounds(date(2024, 5, 1), week_starts_on=6)
    assert start == date(2024, 4, 28)
    assert end == date(2024, 5, 4)
