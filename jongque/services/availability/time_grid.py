# ============================================================================
# jongque/services/availability/time_grid.py
# Pure slot arithmetic - no database access
# ============================================================================
from typing import List, Optional

from jongque.models.business import OperatingHours
from jongque.utils.time_utils import time_to_minutes, format_hhmm

DEFAULT_INTERVAL_MINUTES = 30


def generate_slots(
        open_minute: int,
        close_minute: int,
        service_duration: int,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES
) -> List[int]:
    """
    Candidate start times (minutes since midnight) for one day.

    Starts at open_minute and steps by interval_minutes, keeping every start t
    with t + service_duration <= close_minute.
    """
    if service_duration <= 0:
        raise ValueError("service_duration must be positive")
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    slots = []
    current = open_minute
    while current + service_duration <= close_minute:
        slots.append(current)
        current += interval_minutes
    return slots


def generate_slots_for_hours(
        hours: Optional[OperatingHours],
        service_duration: int,
        interval_minutes: int = DEFAULT_INTERVAL_MINUTES
) -> List[str]:
    """Same as generate_slots, driven by an operating-hours row, formatted as HH:MM"""
    if hours is None or not hours.is_open:
        return []

    starts = generate_slots(
        time_to_minutes(hours.open_time),
        time_to_minutes(hours.close_time),
        service_duration,
        interval_minutes,
    )
    return [format_hhmm(t) for t in starts]
