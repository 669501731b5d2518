# ============================================================================
# FILE: jongque/api/v1/public/availability.py
# Public slot availability - no authentication
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from jongque.config.database import get_db
from jongque.services.availability.availability_service import AvailabilityService

router = APIRouter(tags=["public-availability"])


@router.get("/availability")
def get_availability(
        business_id: UUID = Query(..., description="Business to check"),
        service_id: UUID = Query(..., description="Service the customer wants"),
        booking_date: date = Query(..., alias="date", description="Day to plan (YYYY-MM-DD)"),
        staff_id: Optional[UUID] = Query(None, description="Only consider this staff member's bookings"),
        db: Session = Depends(get_db)
):
    """
    Bookable slots for a service on one day, with waitlist counts and the
    next queue number. Closed days and holidays return an empty slot list.
    """
    return AvailabilityService.plan_availability(
        db=db,
        business_id=business_id,
        service_id=service_id,
        booking_date=booking_date,
        staff_id=staff_id
    )
