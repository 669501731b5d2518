# ============================================================================
# FILE: jongque/api/v1/customer/bookings.py
# Customer bookings - JWT authenticated, thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from jongque.api.dependencies import get_current_user_id
from jongque.config.database import get_db
from jongque.models.booking import BookingStatus
from jongque.schemas.booking import BookingCreateRequest, BookingRescheduleRequest
from jongque.services.booking.booking_number import format_booking_number
from jongque.services.booking.booking_service import BookingService
from jongque.tasks.waitlist_tasks import schedule_waitlist_promotion

router = APIRouter(prefix="/bookings", tags=["customer-bookings"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
        request: BookingCreateRequest,
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    """Book a time slot or take a queue number"""
    booking = BookingService.create_booking(
        db=db,
        business_id=request.business_id,
        service_id=request.service_id,
        booking_date=request.booking_date,
        booking_type=request.type,
        booking_time=request.booking_time,
        staff_id=request.staff_id,
        notes=request.notes,
        customer_id=customer_id
    )

    return {
        "success": True,
        "booking": BookingService.describe_booking(booking),
        "display_number": format_booking_number(booking.booking_number)
    }


@router.get("")
def list_bookings(
        status: Optional[BookingStatus] = Query(None, description="Only bookings in this status"),
        limit: Optional[int] = Query(None, ge=1, le=100, description="Number of records to return"),
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    """Your bookings, newest first"""
    bookings = BookingService.list_customer_bookings(db, customer_id, status=status, limit=limit)
    return {
        "success": True,
        "bookings": [BookingService.describe_booking(b) for b in bookings],
        "total": len(bookings)
    }


@router.get("/{booking_id}")
def get_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    booking = BookingService.get_customer_booking(db, booking_id, customer_id)
    return {
        "success": True,
        "booking": BookingService.describe_booking(booking)
    }


@router.put("/{booking_id}")
def reschedule_booking(
        request: BookingRescheduleRequest,
        booking_id: UUID = Path(..., description="The booking ID"),
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    """Move a confirmed booking to another time, day or staff member"""
    booking = BookingService.reschedule_booking(
        db=db,
        booking_id=booking_id,
        customer_id=customer_id,
        booking_date=request.booking_date,
        booking_time=request.booking_time,
        staff_id=request.staff_id,
        notes=request.notes
    )
    return {
        "success": True,
        "booking": BookingService.describe_booking(booking)
    }


@router.post("/{booking_id}/cancel")
def cancel_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        customer_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db)
):
    """Cancel your booking; the freed slot is offered to its waitlist"""
    booking = BookingService.cancel_booking(db, booking_id, customer_id)
    schedule_waitlist_promotion(booking)

    return {
        "success": True,
        "booking": BookingService.describe_booking(booking)
    }
