# ============================================================================
# FILE: jongque/api/v1/dashboard/bookings.py
# Business-side day view and booking status changes
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from jongque.api.dependencies import get_current_business_id
from jongque.config.database import get_db
from jongque.models.booking import BookingStatus
from jongque.schemas.booking import BookingStatusUpdateRequest
from jongque.services.booking.booking_service import BookingService
from jongque.services.queue.queue_status_service import QueueStatusService
from jongque.tasks.waitlist_tasks import schedule_waitlist_promotion

router = APIRouter(prefix="/bookings", tags=["dashboard-bookings"])


@router.get("")
def list_bookings(
        booking_date: Optional[date] = Query(None, alias="date", description="Day to show, defaults to today"),
        status: Optional[BookingStatus] = Query(None, description="Only bookings in this status"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """Queue-management view: the day's bookings plus counters over the whole day"""
    target_date = booking_date or date.today()
    bookings = BookingService.list_business_bookings(db, business_id, target_date, status)
    day = bookings if status is None else BookingService.list_business_bookings(db, business_id, target_date)

    return {
        "success": True,
        "date": target_date.isoformat(),
        "bookings": [
            {
                **booking.to_dict(),
                "service_name": booking.service.name if booking.service else None,
                "staff_name": booking.staff.name if booking.staff else None,
            }
            for booking in bookings
        ],
        "stats": QueueStatusService.summarize_day(day),
    }


@router.put("/{booking_id}/status")
def update_booking_status(
        request: BookingStatusUpdateRequest,
        booking_id: UUID = Path(..., description="The booking ID"),
        business_id: UUID = Depends(get_current_business_id),
        db: Session = Depends(get_db)
):
    """
    Move a booking through its lifecycle (check in, start, complete,
    cancel, no-show). Transitions out of a terminal status are rejected.
    """
    booking = BookingService.update_status(db, business_id, booking_id, request.status)

    if booking.status == BookingStatus.CANCELLED:
        schedule_waitlist_promotion(booking)

    return {
        "success": True,
        "booking": booking.to_dict()
    }
