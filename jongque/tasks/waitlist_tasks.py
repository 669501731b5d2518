# ===== jongque/tasks/waitlist_tasks.py =====
from datetime import date
from uuid import UUID
import logging

from kombu.exceptions import OperationalError

from jongque.config.celery_config import celery_app
from jongque.config.database import SessionLocal
from jongque.config.settings import get_settings
from jongque.core.exceptions import StorageFailureError
from jongque.models.booking import Booking
from jongque.services.waitlist.waitlist_service import WaitlistService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def promote_waitlist(self, business_id: str, booking_date: str, booking_time: str):
    """Offer a freed slot to the first customer waiting for it"""
    db = SessionLocal()
    try:
        booking = WaitlistService.promote_next(
            db, UUID(business_id), date.fromisoformat(booking_date), booking_time
        )
        if not booking:
            return {"status": "unchanged"}

        logger.info(f"Waitlist promotion created booking {booking.booking_number}")
        return {"status": "promoted", "booking_id": str(booking.id), "booking_number": booking.booking_number}

    except StorageFailureError as exc:
        logger.error(f"Waitlist promotion failed for {business_id} {booking_date} {booking_time}: {exc}")
        raise self.retry(exc=exc, countdown=30)

    finally:
        db.close()


def schedule_waitlist_promotion(booking: Booking) -> bool:
    """
    Queue a promotion for the slot a cancelled booking released.
    Returns False when nothing was queued.
    """
    if not get_settings().WAITLIST_AUTO_PROMOTE or not booking.booking_time:
        return False

    try:
        promote_waitlist.delay(str(booking.business_id), booking.booking_date.isoformat(), booking.booking_time)
    except OperationalError as e:
        # The cancellation is already committed; the slot is still shown as free
        logger.error(f"Could not queue waitlist promotion for booking {booking.id}: {e}", exc_info=True)
        return False
    return True
