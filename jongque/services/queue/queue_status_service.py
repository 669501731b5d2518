# ============================================================================
# jongque/services/queue/queue_status_service.py
# Live queue board for one business day
# ============================================================================
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from jongque.config.settings import get_settings
from jongque.models.booking import Booking, BookingStatus
from jongque.services.business.business_service import BusinessService

PENDING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN, BookingStatus.IN_PROGRESS})


class QueueStatusService:

    @staticmethod
    def get_queue_status(db: Session, business_id: UUID, queue_date: date) -> Dict[str, Any]:
        business = BusinessService.get_active_business(db, business_id)

        bookings = db.query(Booking).options(joinedload(Booking.service)).filter(
            Booking.business_id == business_id,
            Booking.booking_date == queue_date,
            Booking.status != BookingStatus.CANCELLED,
        ).all()
        # Queue numbers first (unnumbered last), then clock time
        bookings.sort(key=lambda b: (b.queue_number is None, b.queue_number or 0, b.booking_time or ""))

        current_serving = QueueStatusService.current_serving(bookings)
        average_minutes = QueueStatusService.average_service_minutes(bookings)

        waiting_count = sum(
            1 for b in bookings
            if b.status == BookingStatus.CONFIRMED
            and b.queue_number
            and b.queue_number > (current_serving or 0)
        )

        return {
            "business_id": str(business.id),
            "business_name": business.name,
            "date": queue_date.isoformat(),
            "current_serving": current_serving,
            "total_queue": sum(1 for b in bookings if b.queue_number),
            "average_wait_time": round(average_minutes),
            "estimated_wait_time": round(waiting_count * average_minutes),
            "queue": [QueueStatusService._serialize_queue_item(b) for b in bookings],
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def current_serving(bookings: List[Booking]) -> Optional[int]:
        """Queue number being served now, else the next confirmed one"""
        in_progress = next(
            (b for b in bookings if b.status == BookingStatus.IN_PROGRESS and b.queue_number),
            None
        )
        if in_progress:
            return in_progress.queue_number

        next_up = next(
            (b for b in bookings if b.status == BookingStatus.CONFIRMED and b.queue_number),
            None
        )
        return next_up.queue_number if next_up else None

    @staticmethod
    def average_service_minutes(bookings: List[Booking]) -> float:
        durations = [
            (b.actual_end_time - b.actual_start_time).total_seconds() / 60
            for b in bookings
            if b.status == BookingStatus.COMPLETED and b.actual_start_time and b.actual_end_time
        ]
        if not durations:
            return float(get_settings().DEFAULT_AVERAGE_SERVICE_MINUTES)
        return sum(durations) / len(durations)

    @staticmethod
    def _serialize_queue_item(booking: Booking) -> Dict[str, Any]:
        return {
            "id": str(booking.id),
            "booking_number": booking.booking_number,
            "queue_number": booking.queue_number or 0,
            "customer_name": booking.customer_name or "Customer",
            "service_name": booking.service.name if booking.service else None,
            "estimated_duration": booking.estimated_duration or 0,
            "status": booking.status.value,
            "booking_time": booking.booking_time,
            "notes": booking.notes,
        }

    @staticmethod
    def summarize_day(bookings: List[Booking]) -> Dict[str, Any]:
        """Counters for the business dashboard, over every booking of the day"""
        live = [b for b in bookings if b.status != BookingStatus.CANCELLED]
        live.sort(key=lambda b: (b.queue_number is None, b.queue_number or 0, b.booking_time or ""))
        return {
            "total": len(bookings),
            "completed": sum(1 for b in bookings if b.status == BookingStatus.COMPLETED),
            "pending": sum(1 for b in bookings if b.status in PENDING_STATUSES),
            "cancelled": sum(1 for b in bookings if b.status == BookingStatus.CANCELLED),
            "no_show": sum(1 for b in bookings if b.status == BookingStatus.NO_SHOW),
            "current_queue": QueueStatusService.current_serving(live),
            "average_service_time": round(QueueStatusService.average_service_minutes(live)),
        }
