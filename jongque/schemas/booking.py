"""
Pydantic schemas for booking and waitlist requests
"""
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from jongque.models.booking import BookingStatus, BookingType
from jongque.utils.time_utils import parse_hhmm


def _validate_hhmm(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    parse_hhmm(v)  # raises ValueError with a readable message
    return v


class BookingCreateRequest(BaseModel):
    """Booking made by a signed-in customer"""
    business_id: UUID
    service_id: UUID
    staff_id: Optional[UUID] = None
    booking_date: date
    booking_time: Optional[str] = Field(None, description="HH:MM, required for TIME_SLOT bookings")
    type: BookingType = BookingType.TIME_SLOT
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("booking_time")
    @classmethod
    def validate_booking_time(cls, v):
        return _validate_hhmm(v)


class GuestBookingCreateRequest(BookingCreateRequest):
    """Booking made without an account"""
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_phone: str = Field(..., min_length=6, max_length=20)
    customer_email: Optional[str] = Field(None, max_length=255)


class BookingRescheduleRequest(BaseModel):
    booking_date: Optional[date] = None
    booking_time: Optional[str] = None
    staff_id: Optional[UUID] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("booking_time")
    @classmethod
    def validate_booking_time(cls, v):
        return _validate_hhmm(v)


class BookingStatusUpdateRequest(BaseModel):
    status: BookingStatus


class WaitlistJoinRequest(BaseModel):
    business_id: UUID
    service_id: UUID
    staff_id: Optional[UUID] = None
    booking_date: date
    booking_time: str
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("booking_time")
    @classmethod
    def validate_booking_time(cls, v):
        return _validate_hhmm(v)
