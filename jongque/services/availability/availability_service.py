# ===== jongque/services/availability/availability_service.py =====
from datetime import date
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from jongque.config.settings import get_settings
from jongque.models.waitlist import WaitlistEntry, WaitlistStatus
from jongque.services.availability.conflict_checker import ConflictChecker
from jongque.services.availability.time_grid import generate_slots_for_hours
from jongque.services.business.business_service import BusinessService
from jongque.services.queue.queue_sequencer import QueueSequencer
from jongque.utils.time_utils import parse_hhmm
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Answers "which slots are open, and what is the next queue number" for a day"""

    @staticmethod
    def plan_availability(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            booking_date: date,
            staff_id: Optional[UUID] = None,
            interval_minutes: Optional[int] = None
    ) -> Dict:
        """
        Read-only composition of the slot grid, the conflict checker and the
        queue sequencer. Closed days and holidays are not errors: they come
        back with an empty slot list and a status explaining why.
        """
        interval_minutes = interval_minutes or get_settings().SLOT_INTERVAL_MINUTES
        BusinessService.get_active_business(db, business_id)

        result = {
            "success": True,
            "business_id": str(business_id),
            "service_id": str(service_id),
            "staff_id": str(staff_id) if staff_id else None,
            "date": booking_date.isoformat(),
            "slots": [],
            "next_queue_number": None,
            "operating_hours": None,
        }

        holiday = BusinessService.find_holiday(db, business_id, booking_date)
        if holiday:
            result.update(status="holiday", message=f"Closed for {holiday.name}")
            return result

        hours = BusinessService.get_hours_for_date(db, business_id, booking_date)
        if not hours:
            result.update(status="closed", message="The business is closed on this day")
            return result

        service = BusinessService.get_service_for_business(db, business_id, service_id)

        # One read of the ledger per request; every slot is judged against it
        bookings = ConflictChecker.active_bookings(db, business_id, booking_date, staff_id)
        waitlist_counts = AvailabilityService._waitlist_counts(db, business_id, booking_date)

        slots = []
        for slot_time in generate_slots_for_hours(hours, service.duration, interval_minutes):
            conflict = ConflictChecker.find_conflict_in(bookings, parse_hhmm(slot_time), service.duration)
            slots.append({
                "time": slot_time,
                "available": conflict is None,
                "waitlist_count": waitlist_counts.get(slot_time, 0),
            })

        logger.debug(
            f"Planned {len(slots)} slots for business {business_id} service {service_id} on {booking_date}"
        )

        result.update(
            status="open",
            message=None,
            slots=slots,
            next_queue_number=QueueSequencer.next_queue_number(db, business_id, booking_date),
            operating_hours={
                "open_time": hours.open_time.strftime("%H:%M"),
                "close_time": hours.close_time.strftime("%H:%M"),
            },
        )
        return result

    @staticmethod
    def _waitlist_counts(db: Session, business_id: UUID, booking_date: date) -> Dict[str, int]:
        """WAITING entries per exact time for the day"""
        rows = db.query(WaitlistEntry.booking_time, func.count(WaitlistEntry.id)).filter(
            WaitlistEntry.business_id == business_id,
            WaitlistEntry.booking_date == booking_date,
            WaitlistEntry.status == WaitlistStatus.WAITING,
        ).group_by(WaitlistEntry.booking_time).all()
        return {booking_time: count for booking_time, count in rows}
