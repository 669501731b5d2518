# jongque/utils/time_utils.py
"""Wall-clock helpers: bookings store times as "HH:MM" strings"""
import re
from datetime import date, time

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    match = _HHMM.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" """
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minutes}")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def time_to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def sunday_based_weekday(d: date) -> int:
    """Day index used by operating hours: 0=Sunday ... 6=Saturday"""
    return (d.weekday() + 1) % 7
