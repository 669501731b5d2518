# ============================================================================
# FILE: jongque/api/v1/public/guest_bookings.py
# Bookings without an account; looked up later by token
# ============================================================================
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from jongque.config.database import get_db
from jongque.schemas.booking import GuestBookingCreateRequest
from jongque.services.booking.booking_number import format_booking_number
from jongque.services.booking.booking_service import BookingService

router = APIRouter(prefix="/bookings/guest", tags=["public-bookings"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_guest_booking(
        request: GuestBookingCreateRequest,
        db: Session = Depends(get_db)
):
    """
    Book as a guest. The response carries the lookup token the guest needs
    to see the booking again.
    """
    booking = BookingService.create_booking(
        db=db,
        business_id=request.business_id,
        service_id=request.service_id,
        booking_date=request.booking_date,
        booking_type=request.type,
        booking_time=request.booking_time,
        staff_id=request.staff_id,
        notes=request.notes,
        customer_name=request.customer_name,
        customer_email=request.customer_email,
        customer_phone=request.customer_phone
    )

    return {
        "success": True,
        "booking": BookingService.describe_booking(booking),
        "display_number": format_booking_number(booking.booking_number),
        "lookup_token": booking.guest_lookup_token
    }


@router.get("/{token}")
def lookup_guest_booking(
        token: str = Path(..., min_length=32, max_length=32, description="Guest lookup token"),
        db: Session = Depends(get_db)
):
    booking = BookingService.lookup_guest_booking(db, token)
    return {
        "success": True,
        "booking": BookingService.describe_booking(booking)
    }
