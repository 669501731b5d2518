# ============================================================================
# jongque/services/availability/conflict_checker.py
# ============================================================================
"""Decides whether a candidate interval collides with a live booking"""
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from jongque.models.booking import Booking, BookingStatus
from jongque.utils.time_utils import parse_hhmm


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open [start, end) intersection test"""
    return a_start < b_end and b_start < a_end


class ConflictChecker:
    """Read-only checks against the booking ledger"""

    @staticmethod
    def active_bookings(
            db: Session,
            business_id: UUID,
            booking_date: date,
            staff_id: Optional[UUID] = None,
            exclude_booking_id: Optional[UUID] = None
    ) -> List[Booking]:
        """Non-cancelled bookings for the business on a date (and staff member, if given)"""
        query = db.query(Booking).filter(
            Booking.business_id == business_id,
            Booking.booking_date == booking_date,
            Booking.status != BookingStatus.CANCELLED,
        )
        if staff_id:
            query = query.filter(Booking.staff_id == staff_id)
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.all()

    @staticmethod
    def find_conflict_in(
            bookings: Iterable[Booking],
            start_minute: int,
            duration: int
    ) -> Optional[Booking]:
        """First booking whose interval overlaps [start, start + duration)"""
        end_minute = start_minute + duration
        for booking in bookings:
            # Queue-number bookings have no clock time and never block a slot
            if not booking.booking_time:
                continue
            existing_start = parse_hhmm(booking.booking_time)
            existing_end = existing_start + (booking.estimated_duration or 0)
            if intervals_overlap(existing_start, existing_end, start_minute, end_minute):
                return booking
        return None

    @staticmethod
    def find_conflict(
            db: Session,
            business_id: UUID,
            staff_id: Optional[UUID],
            booking_date: date,
            start_time: str,
            duration: int,
            exclude_booking_id: Optional[UUID] = None
    ) -> Optional[Booking]:
        bookings = ConflictChecker.active_bookings(
            db, business_id, booking_date, staff_id, exclude_booking_id
        )
        return ConflictChecker.find_conflict_in(bookings, parse_hhmm(start_time), duration)

    @staticmethod
    def is_available(
            db: Session,
            business_id: UUID,
            staff_id: Optional[UUID],
            booking_date: date,
            start_time: str,
            duration: int,
            exclude_booking_id: Optional[UUID] = None
    ) -> bool:
        """True iff no live booking overlaps the requested interval"""
        return ConflictChecker.find_conflict(
            db, business_id, staff_id, booking_date, start_time, duration, exclude_booking_id
        ) is None
