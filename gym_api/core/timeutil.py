"""
Time-of-day normalization.

Stored times and calendar slots are compared as minutes since midnight, so
"10:00 AM", "10:00", "10:00:00" and "10am" all refer to the same instant.
"""
import re
from datetime import date, time, timedelta
from typing import List, Tuple, Union

from gym_api.core.exceptions import ValidationError

_TIME_RE = re.compile(
    r"^\s*(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?::(?P<second>\d{2}))?\s*(?P<meridiem>[AaPp]\.?[Mm]\.?)?\s*$"
)

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: Union[str, time]) -> int:
    """Parse a time of day into minutes since midnight."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Time is required")

    match = _TIME_RE.match(value)
    if not match:
        raise ValidationError(f"Unrecognized time format: '{value}'")

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    second = int(match.group("second") or 0)
    meridiem = match.group("meridiem")

    if minute > 59:
        raise ValidationError(f"Invalid minute in time '{value}'")
    if second > 59:
        raise ValidationError(f"Invalid second in time '{value}'")

    if meridiem:
        if not 1 <= hour <= 12:
            raise ValidationError(f"Invalid 12-hour time '{value}'")
        is_pm = meridiem[0].lower() == "p"
        hour = hour % 12 + (12 if is_pm else 0)
    elif hour > 23:
        raise ValidationError(f"Invalid hour in time '{value}'")

    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    """Canonical 24-hour HH:MM representation."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: Union[str, time]) -> str:
    return format_minutes(to_minutes(value))


def hour_label(hour: int) -> str:
    """Dashboard-style label, e.g. 0 -> '12:00 AM', 13 -> '1:00 PM'."""
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display}:00 {suffix}"


def hour_slots() -> List[Tuple[int, str]]:
    return [(hour, hour_label(hour)) for hour in range(24)]


def week_bounds(anchor: date, week_starts_on: int = 0) -> Tuple[date, date]:
    """First and last day of the week containing `anchor` (0 = Monday)."""
    offset = (anchor.weekday() - week_starts_on) % 7
    start = anchor - timedelta(days=offset)
    return start, start + timedelta(days=6)
