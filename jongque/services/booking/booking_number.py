# jongque/services/booking/booking_number.py
"""Human-readable booking numbers and guest lookup tokens"""
import logging
import random
import secrets
import time
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from jongque.config.settings import get_settings
from jongque.models.booking import Booking

logger = logging.getLogger(__name__)

BOOKING_NUMBER_PREFIX = "JQ"


def generate_booking_number(db: Session, today: Optional[date] = None) -> str:
    """
    Generate a unique booking number.
    Format: JQ + YYYYMMDD + 4-digit sequence
    """
    settings = get_settings()
    date_str = (today or date.today()).strftime("%Y%m%d")

    for _ in range(settings.BOOKING_NUMBER_MAX_ATTEMPTS):
        sequence = random.randint(1000, 9999)
        booking_number = f"{BOOKING_NUMBER_PREFIX}{date_str}{sequence}"

        exists = db.query(Booking.id).filter(Booking.booking_number == booking_number).first()
        if not exists:
            return booking_number

    # Day is crowded: fall back to the millisecond clock
    logger.warning(f"Random booking numbers exhausted for {date_str}, using timestamp suffix")
    suffix = str(int(time.time() * 1000))[-4:]
    return f"{BOOKING_NUMBER_PREFIX}{date_str}{suffix}"


def format_booking_number(booking_number: str) -> str:
    """JQ202501170042 -> JQ-2025-01-17-0042; anything else is returned unchanged"""
    if len(booking_number) != 14 or not booking_number.startswith(BOOKING_NUMBER_PREFIX):
        return booking_number

    prefix = booking_number[:2]
    year, month, day = booking_number[2:6], booking_number[6:8], booking_number[8:10]
    sequence = booking_number[10:]
    return f"{prefix}-{year}-{month}-{day}-{sequence}"


def generate_guest_lookup_token() -> str:
    """32 upper-case hex characters"""
    return secrets.token_hex(16).upper()
