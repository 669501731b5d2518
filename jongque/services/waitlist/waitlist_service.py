# ============================================================================
# jongque/services/waitlist/waitlist_service.py
# ============================================================================
"""
Waitlist positions are kept per (business, date, time) partition. WAITING
entries in a partition always hold positions 1..N: joins append at N + 1, and
any entry that leaves or is converted pulls every later entry up by one.
Writers on the same day take the day guard so positions stay contiguous.
"""
import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from jongque.core.exceptions import (
    AlreadyBookedError,
    ConflictError,
    DuplicateEntryError,
    InvalidRequestError,
    NotFoundError,
)
from jongque.core.storage import storage_errors
from jongque.models.booking import Booking, BookingStatus, BookingType
from jongque.models.waitlist import WaitlistEntry, WaitlistStatus
from jongque.services.availability.conflict_checker import ConflictChecker
from jongque.services.booking.booking_service import BookingService
from jongque.services.business.business_service import BusinessService
from jongque.services.queue.queue_sequencer import QueueSequencer

logger = logging.getLogger(__name__)


class WaitlistService:

    @staticmethod
    def count_waiting(db: Session, business_id: UUID, booking_date: date, booking_time: str) -> int:
        return db.query(WaitlistEntry).filter(
            WaitlistEntry.business_id == business_id,
            WaitlistEntry.booking_date == booking_date,
            WaitlistEntry.booking_time == booking_time,
            WaitlistEntry.status == WaitlistStatus.WAITING,
        ).count()

    @staticmethod
    def join(
            db: Session,
            customer_id: UUID,
            business_id: UUID,
            service_id: UUID,
            booking_date: date,
            booking_time: str,
            staff_id: Optional[UUID] = None,
            notes: Optional[str] = None,
            today: Optional[date] = None
    ) -> WaitlistEntry:
        """Append the customer to the end of the slot's waitlist"""
        BookingService.parse_time(booking_time)
        if booking_date < (today or date.today()):
            raise InvalidRequestError("Cannot join the waitlist for a date in the past")

        BusinessService.get_active_business(db, business_id)
        BusinessService.get_service_for_business(db, business_id, service_id)
        if staff_id:
            BusinessService.get_staff_for_business(db, business_id, staff_id)

        with storage_errors(db, "join waitlist"):
            QueueSequencer.acquire_day_guard(db, business_id, booking_date)

            duplicate = db.query(WaitlistEntry.id).filter(
                WaitlistEntry.customer_id == customer_id,
                WaitlistEntry.business_id == business_id,
                WaitlistEntry.service_id == service_id,
                WaitlistEntry.booking_date == booking_date,
                WaitlistEntry.booking_time == booking_time,
                WaitlistEntry.status == WaitlistStatus.WAITING,
            ).first()
            if duplicate:
                db.rollback()
                raise DuplicateEntryError("You are already on the waitlist for this time")

            booked = db.query(Booking.id).filter(
                Booking.customer_id == customer_id,
                Booking.business_id == business_id,
                Booking.booking_date == booking_date,
                Booking.booking_time == booking_time,
                Booking.status != BookingStatus.CANCELLED,
            ).first()
            if booked:
                db.rollback()
                raise AlreadyBookedError("You already have a booking at this time")

            position = WaitlistService.count_waiting(db, business_id, booking_date, booking_time) + 1

            entry = WaitlistEntry(
                customer_id=customer_id,
                business_id=business_id,
                service_id=service_id,
                staff_id=staff_id,
                booking_date=booking_date,
                booking_time=booking_time,
                position=position,
                notes=notes,
                status=WaitlistStatus.WAITING,
            )
            db.add(entry)
            db.commit()
            db.refresh(entry)

        logger.info(
            f"Customer {customer_id} joined waitlist for {business_id} {booking_date} {booking_time} "
            f"at position {entry.position}"
        )
        return entry

    @staticmethod
    def leave(db: Session, entry_id: UUID, customer_id: UUID) -> None:
        """Cancel the customer's WAITING entry and close the gap it leaves"""
        entry = WaitlistService._waiting_entry(db, entry_id, customer_id=customer_id)

        with storage_errors(db, "leave waitlist"):
            QueueSequencer.acquire_day_guard(db, entry.business_id, entry.booking_date)
            db.refresh(entry)
            if entry.status != WaitlistStatus.WAITING:
                db.rollback()
                raise NotFoundError("Waitlist entry not found")

            entry.status = WaitlistStatus.CANCELLED
            entry.left_at = datetime.now(timezone.utc)
            WaitlistService._close_gap(db, entry)
            db.commit()

        logger.info(f"Customer {customer_id} left waitlist entry {entry_id}")

    @staticmethod
    def list_for_customer(db: Session, customer_id: UUID) -> List[WaitlistEntry]:
        return db.query(WaitlistEntry).filter(
            WaitlistEntry.customer_id == customer_id,
            WaitlistEntry.status == WaitlistStatus.WAITING,
        ).order_by(
            WaitlistEntry.booking_date.asc(),
            WaitlistEntry.booking_time.asc(),
            WaitlistEntry.position.asc(),
        ).all()

    @staticmethod
    def convert_entry(
            db: Session,
            entry_id: UUID,
            business_id: Optional[UUID] = None,
            today: Optional[date] = None
    ) -> Booking:
        """
        Turn a WAITING entry into a CONFIRMED time-slot booking.

        Raises ConflictError while the slot is still taken, which can change
        later. NotFoundError and InvalidRequestError (date passed, service gone,
        customer already booked that day) mean the entry can never convert.
        """
        entry = WaitlistService._waiting_entry(db, entry_id, business_id=business_id)
        if entry.booking_date < (today or date.today()):
            raise InvalidRequestError("The waitlisted date has already passed")
        BusinessService.get_service_for_business(db, entry.business_id, entry.service_id)

        with storage_errors(db, "convert waitlist entry"):
            QueueSequencer.acquire_day_guard(db, entry.business_id, entry.booking_date)
            db.refresh(entry)
            if entry.status != WaitlistStatus.WAITING:
                db.rollback()
                raise NotFoundError("Waitlist entry not found")

            service = BusinessService.get_service_for_business(db, entry.business_id, entry.service_id, lock=True)
            BookingService.ensure_one_per_day(db, entry.customer_id, entry.business_id, entry.booking_date)

            conflict = ConflictChecker.find_conflict(
                db, entry.business_id, entry.staff_id, entry.booking_date, entry.booking_time, service.duration
            )
            if conflict:
                db.rollback()
                raise ConflictError("The slot is still booked")

            booking = BookingService.build_booking(
                db,
                service,
                entry.booking_date,
                BookingType.TIME_SLOT,
                booking_time=entry.booking_time,
                staff_id=entry.staff_id,
                customer_id=entry.customer_id,
                notes=entry.notes,
            )
            QueueSequencer.insert_booking(db, booking)

            entry.status = WaitlistStatus.CONVERTED
            entry.converted_at = datetime.now(timezone.utc)
            entry.booking_id = booking.id
            WaitlistService._close_gap(db, entry)
            db.commit()
            db.refresh(booking)

        logger.info(f"Converted waitlist entry {entry_id} into booking {booking.booking_number}")
        return booking

    @staticmethod
    def promote_next(
            db: Session,
            business_id: UUID,
            booking_date: date,
            booking_time: str,
            today: Optional[date] = None
    ) -> Optional[Booking]:
        """
        Convert the head of the slot's waitlist if the slot is free; None otherwise.
        Heads that can never convert are cancelled so they do not block the
        entries behind them.
        """
        while True:
            head = db.query(WaitlistEntry).filter(
                WaitlistEntry.business_id == business_id,
                WaitlistEntry.booking_date == booking_date,
                WaitlistEntry.booking_time == booking_time,
                WaitlistEntry.status == WaitlistStatus.WAITING,
            ).order_by(WaitlistEntry.position.asc()).first()
            if not head:
                return None

            try:
                return WaitlistService.convert_entry(db, head.id, today=today)
            except ConflictError:
                logger.info(f"Slot {booking_date} {booking_time} for {business_id} still occupied, waitlist unchanged")
                return None
            except (NotFoundError, InvalidRequestError) as e:
                logger.warning(f"Dropping unpromotable waitlist entry {head.id}: {e.message}")
                WaitlistService._drop_entry(db, head)

    @staticmethod
    def _waiting_entry(
            db: Session,
            entry_id: UUID,
            customer_id: Optional[UUID] = None,
            business_id: Optional[UUID] = None
    ) -> WaitlistEntry:
        query = db.query(WaitlistEntry).filter(
            WaitlistEntry.id == entry_id,
            WaitlistEntry.status == WaitlistStatus.WAITING,
        )
        if customer_id:
            query = query.filter(WaitlistEntry.customer_id == customer_id)
        if business_id:
            query = query.filter(WaitlistEntry.business_id == business_id)

        entry = query.first()
        if not entry:
            raise NotFoundError("Waitlist entry not found")
        return entry

    @staticmethod
    def _drop_entry(db: Session, entry: WaitlistEntry) -> None:
        """Cancel an entry on the business's behalf, unless it already left the queue"""
        with storage_errors(db, "drop waitlist entry"):
            QueueSequencer.acquire_day_guard(db, entry.business_id, entry.booking_date)
            db.refresh(entry)
            if entry.status == WaitlistStatus.WAITING:
                entry.status = WaitlistStatus.CANCELLED
                entry.left_at = datetime.now(timezone.utc)
                WaitlistService._close_gap(db, entry)
            db.commit()

    @staticmethod
    def _close_gap(db: Session, entry: WaitlistEntry) -> None:
        """Shift every later WAITING entry in the partition up by one"""
        db.query(WaitlistEntry).filter(
            WaitlistEntry.business_id == entry.business_id,
            WaitlistEntry.booking_date == entry.booking_date,
            WaitlistEntry.booking_time == entry.booking_time,
            WaitlistEntry.status == WaitlistStatus.WAITING,
            WaitlistEntry.position > entry.position,
        ).update(
            {WaitlistEntry.position: WaitlistEntry.position - 1},
            synchronize_session=False
        )
