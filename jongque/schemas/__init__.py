# jongque/schemas/__init__.py
from .booking import (
    BookingCreateRequest,
    GuestBookingCreateRequest,
    BookingRescheduleRequest,
    BookingStatusUpdateRequest,
    WaitlistJoinRequest,
)

from .business import (
    OperatingHoursItem,
    OperatingHoursUpdateRequest,
    HolidayCreateRequest,
    ServiceCreateRequest,
    ServiceUpdateRequest,
    ServiceStatusUpdateRequest,
)

__all__ = [
    "BookingCreateRequest",
    "GuestBookingCreateRequest",
    "BookingRescheduleRequest",
    "BookingStatusUpdateRequest",
    "WaitlistJoinRequest",
    "OperatingHoursItem",
    "OperatingHoursUpdateRequest",
    "HolidayCreateRequest",
    "ServiceCreateRequest",
    "ServiceUpdateRequest",
    "ServiceStatusUpdateRequest",
]
