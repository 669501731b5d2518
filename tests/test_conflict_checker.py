"""
Tests for interval conflict detection.
"""
import pytest

from jongque.models.booking import BookingStatus
from jongque.services.availability.conflict_checker import ConflictChecker, intervals_overlap
from tests.conftest import add_booking


class TestIntervalsOverlap:

    @pytest.mark.parametrize("a, b, expected", [
        ((600, 660), (630, 690), True),
        ((600, 660), (660, 720), False),  # touching end to start
        ((600, 660), (540, 600), False),
        ((600, 720), (630, 660), True),   # containment
        ((600, 660), (600, 660), True),
    ])
    def test_half_open(self, a, b, expected):
        assert intervals_overlap(a[0], a[1], b[0], b[1]) is expected
        assert intervals_overlap(b[0], b[1], a[0], a[1]) is expected


class TestConflictChecker:
    """Tests for ConflictChecker against the ledger."""

    def test_overlapping_booking_conflicts(self, db, business, service, monday):
        existing = add_booking(db, business, service, monday, booking_time="10:00")

        conflict = ConflictChecker.find_conflict(db, business.id, None, monday, "10:30", 60)

        assert conflict.id == existing.id

    def test_adjacent_booking_is_free(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00")

        assert ConflictChecker.is_available(db, business.id, None, monday, "11:00", 60)
        assert ConflictChecker.is_available(db, business.id, None, monday, "09:00", 60)

    def test_cancelled_booking_never_conflicts(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CANCELLED)

        assert ConflictChecker.is_available(db, business.id, None, monday, "10:00", 60)

    def test_queue_booking_never_conflicts(self, db, business, service, monday):
        add_booking(db, business, service, monday, queue_number=1)

        assert ConflictChecker.is_available(db, business.id, None, monday, "10:00", 60)

    def test_staff_filter_only_considers_that_staff(self, db, business, service, staff, monday):
        """Should ignore other staff members' bookings when a staff member is given."""
        add_booking(db, business, service, monday, booking_time="10:00")

        assert ConflictChecker.is_available(db, business.id, staff.id, monday, "10:00", 60)
        assert not ConflictChecker.is_available(db, business.id, None, monday, "10:00", 60)

    def test_exclude_booking(self, db, business, service, monday):
        existing = add_booking(db, business, service, monday, booking_time="10:00")

        assert ConflictChecker.is_available(
            db, business.id, None, monday, "10:00", 60, exclude_booking_id=existing.id
        )

    def test_other_business_is_ignored(self, db, business, other_business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00")

        assert ConflictChecker.is_available(db, other_business.id, None, monday, "10:00", 60)
