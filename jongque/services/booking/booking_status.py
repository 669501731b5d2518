# ============================================================================
# jongque/services/booking/booking_status.py
# The single authority on booking status transitions
# ============================================================================
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional

from jongque.core.exceptions import InvalidTransitionError
from jongque.models.booking import Booking, BookingStatus

_ABNORMAL_EXITS = frozenset({BookingStatus.CANCELLED, BookingStatus.NO_SHOW})

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CHECKED_IN}) | _ABNORMAL_EXITS,
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.IN_PROGRESS}) | _ABNORMAL_EXITS,
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED}) | _ABNORMAL_EXITS,
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def can_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def validate_transition(current: BookingStatus, requested: BookingStatus) -> None:
    if not can_transition(current, requested):
        raise InvalidTransitionError(
            f"Cannot change booking status from {current.value} to {requested.value}"
        )


def apply_transition(
        booking: Booking,
        requested: BookingStatus,
        now: Optional[datetime] = None
) -> Booking:
    """
    Validate and apply a status change in memory, stamping timestamps.
    Raises before touching the booking when the transition is not allowed.
    """
    validate_transition(booking.status, requested)
    now = now or datetime.now(timezone.utc)

    if requested == BookingStatus.IN_PROGRESS and not booking.actual_start_time:
        booking.actual_start_time = now

    if requested == BookingStatus.COMPLETED:
        if not booking.actual_end_time:
            booking.actual_end_time = now
        if not booking.actual_start_time:
            booking.actual_start_time = now

    if requested == BookingStatus.CANCELLED:
        booking.cancelled_at = now

    booking.status = requested
    return booking
