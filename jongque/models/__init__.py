# jongque/models/__init__.py
from .base import Base
from .business import Business, OperatingHours, Holiday
from .staff import Staff
from .service import Service
from .booking import Booking, BookingDayGuard, BookingStatus, BookingType
from .waitlist import WaitlistEntry, WaitlistStatus

__all__ = [
    "Base",
    "Business",
    "OperatingHours",
    "Holiday",
    "Staff",
    "Service",
    "Booking",
    "BookingDayGuard",
    "BookingStatus",
    "BookingType",
    "WaitlistEntry",
    "WaitlistStatus",
]
