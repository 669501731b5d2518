# ============================================================================
# jongque/services/queue/queue_sequencer.py
# Queue numbers and the per-day claim guard
# ============================================================================
"""
Queue numbers are "max + 1" per (business, date). The read alone is racy, so
claims go through two storage-level mechanisms:

  * acquire_day_guard() locks the BookingDayGuard row for the partition
    (SELECT ... FOR UPDATE), serialising writers on the same day
  * insert_booking() inserts inside a SAVEPOINT and, if the partial unique
    index on queue numbers rejects the row, re-reads the max and retries
"""
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jongque.config.settings import get_settings
from jongque.core.exceptions import ConflictError
from jongque.models.booking import Booking, BookingDayGuard, BookingStatus, BookingType
from jongque.services.booking.booking_number import generate_booking_number

logger = logging.getLogger(__name__)


class QueueSequencer:
    """Assigns queue numbers within a (business, date) partition"""

    @staticmethod
    def next_queue_number(db: Session, business_id: UUID, booking_date: date) -> int:
        """Highest live queue number for the day plus one, or 1 for an empty day"""
        current_max = db.query(func.max(Booking.queue_number)).filter(
            Booking.business_id == business_id,
            Booking.booking_date == booking_date,
            Booking.queue_number.isnot(None),
            Booking.status != BookingStatus.CANCELLED,
        ).scalar()
        return (current_max or 0) + 1

    @staticmethod
    def acquire_day_guard(db: Session, business_id: UUID, booking_date: date) -> BookingDayGuard:
        """
        Lock the guard row for the partition, creating it on first use.
        The lock is held until the caller's transaction commits or rolls back.
        """
        guard = QueueSequencer._locked_guard(db, business_id, booking_date)
        if guard is None:
            try:
                with db.begin_nested():
                    db.add(BookingDayGuard(business_id=business_id, booking_date=booking_date, claims=0))
            except IntegrityError:
                # Another writer created it first
                logger.debug(f"Day guard for {business_id} on {booking_date} created concurrently")
            guard = QueueSequencer._locked_guard(db, business_id, booking_date)

        guard.claims += 1
        db.flush()
        return guard

    @staticmethod
    def _locked_guard(db: Session, business_id: UUID, booking_date: date) -> Optional[BookingDayGuard]:
        return db.query(BookingDayGuard).filter(
            BookingDayGuard.business_id == business_id,
            BookingDayGuard.booking_date == booking_date,
        ).with_for_update().first()

    @staticmethod
    def insert_booking(db: Session, booking: Booking, max_retries: Optional[int] = None) -> Booking:
        """
        Insert a booking, assigning its queue number when it is a queue booking.

        Unique violations (queue number or booking number) roll back to the
        savepoint and retry with fresh values. Gives up with ConflictError.
        """
        max_retries = max_retries or get_settings().QUEUE_NUMBER_MAX_RETRIES

        for attempt in range(1, max_retries + 1):
            if booking.booking_type == BookingType.QUEUE_NUMBER:
                booking.queue_number = QueueSequencer.next_queue_number(
                    db, booking.business_id, booking.booking_date
                )
            try:
                with db.begin_nested():
                    db.add(booking)
                return booking
            except IntegrityError as e:
                logger.warning(
                    f"Booking claim collided on attempt {attempt}/{max_retries} "
                    f"for business {booking.business_id} on {booking.booking_date}: {e.orig}"
                )
                booking.booking_number = generate_booking_number(db)

        db.rollback()
        raise ConflictError(
            "Could not reserve a queue number for this day, please try again"
        )
