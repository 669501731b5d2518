# ============================================================================
# jongque/services/booking/booking_service.py
# Booking creation, customer-side changes and business-side status updates
# ============================================================================
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from jongque.core.exceptions import (
    AlreadyBookedError,
    ConflictError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
)
from jongque.core.storage import storage_errors
from jongque.models.booking import Booking, BookingStatus, BookingType
from jongque.models.service import Service
from jongque.services.availability.conflict_checker import ConflictChecker
from jongque.services.booking.booking_number import generate_booking_number, generate_guest_lookup_token
from jongque.services.booking.booking_status import apply_transition
from jongque.services.business.business_service import BusinessService
from jongque.services.queue.queue_sequencer import QueueSequencer
from jongque.utils.time_utils import parse_hhmm, time_to_minutes

logger = logging.getLogger(__name__)

CUSTOMER_CANCELLABLE = frozenset({BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN})


class BookingService:
    """Handles booking operations"""

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def ensure_not_past(booking_date: date, today: Optional[date] = None) -> None:
        if booking_date < (today or date.today()):
            raise InvalidRequestError("Cannot book a date in the past")

    @staticmethod
    def ensure_open_day(db: Session, business_id: UUID, booking_date: date):
        """Operating-hours row for the date; closed days and holidays are rejected"""
        if BusinessService.find_holiday(db, business_id, booking_date):
            raise InvalidRequestError("The business is closed for a holiday on this date")
        hours = BusinessService.get_hours_for_date(db, business_id, booking_date)
        if not hours:
            raise InvalidRequestError("The business is closed on this day")
        return hours

    @staticmethod
    def ensure_within_hours(hours, booking_time: str, duration: int) -> None:
        start = BookingService.parse_time(booking_time)
        if start < time_to_minutes(hours.open_time) or start + duration > time_to_minutes(hours.close_time):
            raise InvalidRequestError("Requested time is outside operating hours")

    @staticmethod
    def ensure_one_per_day(
            db: Session,
            customer_id: UUID,
            business_id: UUID,
            booking_date: date,
            exclude_booking_id: Optional[UUID] = None
    ) -> None:
        """Call under the day guard; rolls back before raising"""
        query = db.query(Booking.id).filter(
            Booking.customer_id == customer_id,
            Booking.business_id == business_id,
            Booking.booking_date == booking_date,
            Booking.status != BookingStatus.CANCELLED,
        )
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        if query.first():
            db.rollback()
            raise AlreadyBookedError("You already have a booking with this business on that day")

    @staticmethod
    def parse_time(booking_time: Optional[str]) -> int:
        try:
            return parse_hhmm(booking_time)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

    @staticmethod
    def build_booking(
            db: Session,
            service: Service,
            booking_date: date,
            booking_type: BookingType,
            booking_time: Optional[str] = None,
            staff_id: Optional[UUID] = None,
            customer_id: Optional[UUID] = None,
            customer_name: Optional[str] = None,
            customer_email: Optional[str] = None,
            customer_phone: Optional[str] = None,
            notes: Optional[str] = None,
            guest: bool = False
    ) -> Booking:
        """Unsaved CONFIRMED booking; the queue number is set when it is inserted"""
        return Booking(
            booking_number=generate_booking_number(db),
            booking_type=booking_type,
            business_id=service.business_id,
            service_id=service.id,
            staff_id=staff_id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            guest_lookup_token=generate_guest_lookup_token() if guest else None,
            booking_date=booking_date,
            booking_time=booking_time if booking_type == BookingType.TIME_SLOT else None,
            estimated_duration=service.duration,
            status=BookingStatus.CONFIRMED,
            notes=notes,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @staticmethod
    def create_booking(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            booking_date: date,
            booking_type: BookingType = BookingType.TIME_SLOT,
            booking_time: Optional[str] = None,
            staff_id: Optional[UUID] = None,
            notes: Optional[str] = None,
            customer_id: Optional[UUID] = None,
            customer_name: Optional[str] = None,
            customer_email: Optional[str] = None,
            customer_phone: Optional[str] = None,
            today: Optional[date] = None
    ) -> Booking:
        """
        Create a booking for a registered customer (customer_id) or a guest
        (name and phone, receives a lookup token).

        Input is validated before the first write. Everything another request
        could change (one booking per customer per day, the service still being
        active, the interval conflict, the queue number) is checked under the
        day guard so two concurrent requests cannot both pass.
        """
        guest = customer_id is None
        if guest and not (customer_name and customer_phone):
            raise InvalidRequestError("Guest bookings require a name and phone number")

        BookingService.ensure_not_past(booking_date, today)
        BusinessService.get_active_business(db, business_id)
        service = BusinessService.get_service_for_business(db, business_id, service_id)
        if staff_id:
            BusinessService.get_staff_for_business(db, business_id, staff_id)

        hours = BookingService.ensure_open_day(db, business_id, booking_date)
        if booking_type == BookingType.TIME_SLOT:
            if not booking_time:
                raise InvalidRequestError("A booking time is required for time-slot bookings")
            BookingService.ensure_within_hours(hours, booking_time, service.duration)

        with storage_errors(db, "create booking"):
            QueueSequencer.acquire_day_guard(db, business_id, booking_date)
            service = BusinessService.get_service_for_business(db, business_id, service_id, lock=True)

            if customer_id:
                BookingService.ensure_one_per_day(db, customer_id, business_id, booking_date)

            if booking_type == BookingType.TIME_SLOT:
                conflict = ConflictChecker.find_conflict(
                    db, business_id, staff_id, booking_date, booking_time, service.duration
                )
                if conflict:
                    db.rollback()
                    raise ConflictError("The selected time is no longer available")

            booking = BookingService.build_booking(
                db,
                service,
                booking_date,
                booking_type,
                booking_time=booking_time,
                staff_id=staff_id,
                customer_id=customer_id,
                customer_name=customer_name,
                customer_email=customer_email,
                customer_phone=customer_phone,
                notes=notes,
                guest=guest,
            )
            QueueSequencer.insert_booking(db, booking)
            db.commit()
            db.refresh(booking)

        logger.info(
            f"Created booking {booking.booking_number} ({booking.booking_type.value}) "
            f"for business {business_id} on {booking_date}"
        )
        return booking

    # ------------------------------------------------------------------
    # Customer reads
    # ------------------------------------------------------------------

    @staticmethod
    def get_customer_booking(db: Session, booking_id: UUID, customer_id: UUID) -> Booking:
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.customer_id == customer_id
        ).first()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    @staticmethod
    def describe_booking(booking: Booking, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Booking plus derived flags used by customer screens"""
        now = now or datetime.now()
        today = now.date()
        is_today = booking.booking_date == today
        is_past = booking.booking_date < today

        time_until_booking = None
        if is_today and booking.booking_time:
            minutes_left = parse_hhmm(booking.booking_time) - (now.hour * 60 + now.minute)
            if minutes_left > 0:
                time_until_booking = minutes_left

        data = booking.to_dict()
        data.update({
            "business_name": booking.business.name if booking.business else None,
            "service_name": booking.service.name if booking.service else None,
            "staff_name": booking.staff.name if booking.staff else None,
            "can_cancel": not is_past and booking.status in CUSTOMER_CANCELLABLE,
            "can_modify": not is_past and booking.status == BookingStatus.CONFIRMED,
            "is_today": is_today,
            "is_past": is_past,
            "time_until_booking": time_until_booking,
        })
        return data

    @staticmethod
    def list_customer_bookings(
            db: Session,
            customer_id: UUID,
            status: Optional[BookingStatus] = None,
            limit: Optional[int] = None
    ) -> List[Booking]:
        query = db.query(Booking).filter(Booking.customer_id == customer_id)
        if status:
            query = query.filter(Booking.status == status)
        query = query.order_by(
            Booking.booking_date.desc(),
            Booking.booking_time.desc(),
            Booking.queue_number.desc(),
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def lookup_guest_booking(db: Session, token: str) -> Booking:
        booking = db.query(Booking).filter(Booking.guest_lookup_token == token.upper()).first()
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    # ------------------------------------------------------------------
    # Customer changes
    # ------------------------------------------------------------------

    @staticmethod
    def reschedule_booking(
            db: Session,
            booking_id: UUID,
            customer_id: UUID,
            booking_date: Optional[date] = None,
            booking_time: Optional[str] = None,
            staff_id: Optional[UUID] = None,
            notes: Optional[str] = None,
            today: Optional[date] = None
    ) -> Booking:
        """Move a CONFIRMED booking; the new interval is checked excluding itself"""
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.customer_id == customer_id,
            Booking.status == BookingStatus.CONFIRMED,
        ).first()
        if not booking:
            raise NotFoundError("No modifiable booking found")

        target_date = booking_date or booking.booking_date
        target_time = booking_time or booking.booking_time
        target_staff = staff_id or booking.staff_id
        moving = (
            target_date != booking.booking_date
            or target_time != booking.booking_time
            or target_staff != booking.staff_id
        )

        if booking.booking_type == BookingType.QUEUE_NUMBER and (booking_time or target_date != booking.booking_date):
            raise InvalidRequestError("Queue bookings cannot be moved; cancel and book again")

        if booking_date:
            BookingService.ensure_not_past(target_date, today)
        if staff_id:
            BusinessService.get_staff_for_business(db, booking.business_id, staff_id)

        if moving and target_time:
            hours = BookingService.ensure_open_day(db, booking.business_id, target_date)
            BookingService.ensure_within_hours(hours, target_time, booking.estimated_duration)

        with storage_errors(db, "reschedule booking"):
            if moving and target_time:
                QueueSequencer.acquire_day_guard(db, booking.business_id, target_date)
                if target_date != booking.booking_date and booking.customer_id:
                    BookingService.ensure_one_per_day(
                        db, booking.customer_id, booking.business_id, target_date, exclude_booking_id=booking.id
                    )
                conflict = ConflictChecker.find_conflict(
                    db,
                    booking.business_id,
                    target_staff,
                    target_date,
                    target_time,
                    booking.estimated_duration,
                    exclude_booking_id=booking.id,
                )
                if conflict:
                    db.rollback()
                    raise ConflictError("The selected time is not available")

            booking.booking_date = target_date
            booking.booking_time = target_time
            booking.staff_id = target_staff
            if notes is not None:
                booking.notes = notes
            db.commit()
            db.refresh(booking)

        logger.info(f"Rescheduled booking {booking.booking_number} to {target_date} {target_time}")
        return booking

    @staticmethod
    def cancel_booking(
            db: Session,
            booking_id: UUID,
            customer_id: UUID,
            today: Optional[date] = None
    ) -> Booking:
        booking = BookingService.get_customer_booking(db, booking_id, customer_id)
        if booking.status not in CUSTOMER_CANCELLABLE:
            raise InvalidTransitionError(
                f"A booking that is {booking.status.value} can no longer be cancelled"
            )
        if booking.booking_date < (today or date.today()):
            raise InvalidRequestError("Past bookings cannot be cancelled")

        return BookingService._transition(db, booking, BookingStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Business side
    # ------------------------------------------------------------------

    @staticmethod
    def list_business_bookings(
            db: Session,
            business_id: UUID,
            booking_date: date,
            status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        """One day of the business, in serving order: queue numbers first, then clock time"""
        query = db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.staff),
        ).filter(
            Booking.business_id == business_id,
            Booking.booking_date == booking_date,
        )
        if status:
            query = query.filter(Booking.status == status)

        bookings = query.all()
        bookings.sort(key=lambda b: (b.queue_number is None, b.queue_number or 0, b.booking_time or ""))
        return bookings

    @staticmethod
    def update_status(db: Session, business_id: UUID, booking_id: UUID, new_status: BookingStatus) -> Booking:
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.business_id == business_id
        ).first()
        if not booking:
            raise NotFoundError("Booking not found")

        return BookingService._transition(db, booking, new_status)

    @staticmethod
    def _transition(db: Session, booking: Booking, new_status: BookingStatus) -> Booking:
        previous = booking.status
        apply_transition(booking, new_status)

        with storage_errors(db, "update booking status"):
            db.commit()
            db.refresh(booking)

        logger.info(f"Booking {booking.booking_number}: {previous.value} -> {new_status.value}")
        return booking
