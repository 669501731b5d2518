"""
Tests for the booking status state machine.
"""
import pytest
from datetime import datetime, timezone

from jongque.core.exceptions import InvalidTransitionError
from jongque.models.booking import Booking, BookingStatus
from jongque.services.booking.booking_status import (
    TERMINAL_STATUSES,
    apply_transition,
    can_transition,
    validate_transition,
)

NOW = datetime(2026, 3, 2, 10, 30, tzinfo=timezone.utc)


class TestTransitions:
    """Tests for the transition table."""

    @pytest.mark.parametrize("current, requested", [
        (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN),
        (BookingStatus.CHECKED_IN, BookingStatus.IN_PROGRESS),
        (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
        (BookingStatus.CHECKED_IN, BookingStatus.NO_SHOW),
        (BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED),
    ])
    def test_allowed(self, current, requested):
        assert can_transition(current, requested)

    @pytest.mark.parametrize("current, requested", [
        (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED),
        (BookingStatus.COMPLETED, BookingStatus.CONFIRMED),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.NO_SHOW, BookingStatus.CHECKED_IN),
    ])
    def test_rejected(self, current, requested):
        assert not can_transition(current, requested)
        with pytest.raises(InvalidTransitionError):
            validate_transition(current, requested)

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}


class TestApplyTransition:
    """Tests for timestamp stamping."""

    def test_in_progress_stamps_start(self):
        booking = Booking(status=BookingStatus.CHECKED_IN)

        apply_transition(booking, BookingStatus.IN_PROGRESS, now=NOW)

        assert booking.status == BookingStatus.IN_PROGRESS
        assert booking.actual_start_time == NOW
        assert booking.actual_end_time is None

    def test_completed_backfills_start(self):
        """Should stamp both start and end when the start was never recorded."""
        booking = Booking(status=BookingStatus.IN_PROGRESS)

        apply_transition(booking, BookingStatus.COMPLETED, now=NOW)

        assert booking.actual_start_time == NOW
        assert booking.actual_end_time == NOW

    def test_cancel_stamps_cancelled_at(self):
        booking = Booking(status=BookingStatus.CONFIRMED)

        apply_transition(booking, BookingStatus.CANCELLED, now=NOW)

        assert booking.cancelled_at == NOW

    def test_rejected_transition_leaves_booking_untouched(self):
        booking = Booking(status=BookingStatus.COMPLETED)

        with pytest.raises(InvalidTransitionError):
            apply_transition(booking, BookingStatus.CANCELLED, now=NOW)

        assert booking.status == BookingStatus.COMPLETED
        assert booking.cancelled_at is None
