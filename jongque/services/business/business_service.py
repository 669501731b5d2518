# jongque/services/business/business_service.py
"""Business lookups, operating hours, holidays and the cached public profile"""
import json
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from jongque.config.redis import get_redis, RedisKeys
from jongque.config.settings import get_settings
from jongque.core.exceptions import (
    BusinessNotFoundError,
    InvalidRequestError,
    NotFoundError,
    ServiceInUseError,
    ServiceNotFoundError,
)
from jongque.core.storage import storage_errors
from jongque.models.booking import Booking, BookingStatus
from jongque.models.business import Business, Holiday, OperatingHours
from jongque.models.service import Service
from jongque.models.staff import Staff
from jongque.models.waitlist import WaitlistEntry
from jongque.utils.time_utils import sunday_based_weekday

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

LIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN, BookingStatus.IN_PROGRESS)
LOCKED_WHILE_BOOKED = ("name", "duration")


class BusinessService:
    """Handles business-related operations"""

    # ------------------------------------------------------------------
    # Lookups shared by the booking engine
    # ------------------------------------------------------------------

    @staticmethod
    def get_active_business(db: Session, business_id: UUID) -> Business:
        business = db.query(Business).filter(Business.id == business_id).first()
        if not business or not business.is_active:
            raise BusinessNotFoundError("Business not found or not currently accepting bookings")
        return business

    @staticmethod
    def get_service_for_business(db: Session, business_id: UUID, service_id: UUID, lock: bool = False) -> Service:
        """
        Active service that belongs to the business. With lock=True the row is
        share-locked so it cannot be deactivated until the transaction ends.
        """
        query = db.query(Service).filter(Service.id == service_id)
        if lock:
            query = query.with_for_update(read=True).populate_existing()
        service = query.first()
        if not service or service.business_id != business_id or not service.is_active:
            if lock:
                db.rollback()
            raise ServiceNotFoundError("Service not found for this business")
        return service

    @staticmethod
    def get_staff_for_business(db: Session, business_id: UUID, staff_id: UUID) -> Staff:
        staff = db.query(Staff).filter(Staff.id == staff_id).first()
        if not staff or staff.business_id != business_id or not staff.is_active:
            raise InvalidRequestError("Staff member does not belong to this business")
        return staff

    @staticmethod
    def get_hours_for_date(db: Session, business_id: UUID, day: date) -> Optional[OperatingHours]:
        """Open operating-hours row for the date's weekday, or None when closed"""
        return db.query(OperatingHours).filter(
            OperatingHours.business_id == business_id,
            OperatingHours.day_of_week == sunday_based_weekday(day),
            OperatingHours.is_open.is_(True),
        ).first()

    @staticmethod
    def find_holiday(db: Session, business_id: UUID, day: date) -> Optional[Holiday]:
        holidays = db.query(Holiday).filter(Holiday.business_id == business_id).all()
        return next((h for h in holidays if h.matches(day)), None)

    # ------------------------------------------------------------------
    # Operating hours
    # ------------------------------------------------------------------

    @staticmethod
    def get_operating_hours(db: Session, business_id: UUID) -> List[Dict]:
        rows = db.query(OperatingHours).filter(
            OperatingHours.business_id == business_id
        ).order_by(OperatingHours.day_of_week.asc()).all()
        return [row.to_dict() for row in rows]

    @staticmethod
    def replace_operating_hours(db: Session, business_id: UUID, hours: Sequence[Dict]) -> List[Dict]:
        """
        Replace all seven rows in one transaction.

        Each item has day_of_week (0=Sunday), open_time, close_time (datetime.time)
        and is_open. Readers never observe a partial week.
        """
        days = {h["day_of_week"] for h in hours}
        if len(hours) != 7 or days != set(range(7)):
            raise InvalidRequestError("Operating hours must contain exactly one entry for each of the 7 days")

        for h in hours:
            if h["is_open"] and h["open_time"] >= h["close_time"]:
                raise InvalidRequestError(
                    f"Closing time must be after opening time on {DAY_NAMES[h['day_of_week']]}"
                )

        with storage_errors(db, "update operating hours"):
            db.query(OperatingHours).filter(
                OperatingHours.business_id == business_id
            ).delete(synchronize_session=False)
            db.flush()

            for h in hours:
                db.add(OperatingHours(
                    business_id=business_id,
                    day_of_week=h["day_of_week"],
                    open_time=h["open_time"],
                    close_time=h["close_time"],
                    is_open=h["is_open"],
                ))
            db.commit()

        logger.info(f"Replaced operating hours for business {business_id}")
        return BusinessService.get_operating_hours(db, business_id)

    # ------------------------------------------------------------------
    # Holidays
    # ------------------------------------------------------------------

    @staticmethod
    def list_holidays(db: Session, business_id: UUID) -> List[Dict]:
        rows = db.query(Holiday).filter(
            Holiday.business_id == business_id
        ).order_by(Holiday.date.asc()).all()
        return [row.to_dict() for row in rows]

    @staticmethod
    def add_holiday(db: Session, business_id: UUID, name: str, holiday_date: date, is_recurring: bool) -> Dict:
        holiday = Holiday(
            business_id=business_id,
            name=name,
            date=holiday_date,
            is_recurring=is_recurring,
        )
        with storage_errors(db, "add holiday"):
            db.add(holiday)
            db.commit()
            db.refresh(holiday)

        logger.info(f"Added holiday {holiday.name} ({holiday.date}) for business {business_id}")
        return holiday.to_dict()

    @staticmethod
    def delete_holiday(db: Session, business_id: UUID, holiday_id: UUID) -> None:
        holiday = db.query(Holiday).filter(
            Holiday.id == holiday_id,
            Holiday.business_id == business_id
        ).first()
        if not holiday:
            raise NotFoundError("Holiday not found")

        with storage_errors(db, "delete holiday"):
            db.delete(holiday)
            db.commit()

    # ------------------------------------------------------------------
    # Service catalogue
    # ------------------------------------------------------------------

    @staticmethod
    def list_services(db: Session, business_id: UUID) -> List[Dict]:
        """Every service of the business, active ones first"""
        rows = db.query(Service).filter(
            Service.business_id == business_id
        ).order_by(Service.is_active.desc(), Service.created_at.asc(), Service.name.asc()).all()
        return [row.to_dict() for row in rows]

    @staticmethod
    def create_service(
            db: Session,
            business_id: UUID,
            name: str,
            duration: int,
            price: Optional[Decimal] = None,
            description: Optional[str] = None
    ) -> Service:
        BusinessService.get_active_business(db, business_id)
        service = Service(
            business_id=business_id,
            name=name,
            duration=duration,
            price=price or None,
            description=description or None,
            is_active=True,
        )
        with storage_errors(db, "create service"):
            db.add(service)
            db.commit()
            db.refresh(service)

        logger.info(f"Created service {service.name} ({service.duration} min) for business {business_id}")
        return service

    @staticmethod
    def count_upcoming_bookings(db: Session, service_id: UUID, today: Optional[date] = None) -> int:
        """Bookings from today on that still expect the service to be delivered"""
        return db.query(Booking).filter(
            Booking.service_id == service_id,
            Booking.status.in_(LIVE_BOOKING_STATUSES),
            Booking.booking_date >= (today or date.today()),
        ).count()

    @staticmethod
    def update_service(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            changes: Dict,
            today: Optional[date] = None
    ) -> Service:
        """
        Apply a partial update. While upcoming bookings reference the service
        only description and price may change; name and duration are what
        those customers booked.
        """
        with storage_errors(db, "update service"):
            service = BusinessService._owned_service(db, business_id, service_id)

            locked = [
                field for field in LOCKED_WHILE_BOOKED
                if field in changes and changes[field] != getattr(service, field)
            ]
            if locked and BusinessService.count_upcoming_bookings(db, service.id, today):
                db.rollback()
                raise ServiceInUseError(
                    f"Cannot change {' and '.join(locked)} while upcoming bookings use this service"
                )

            for field in ("name", "description", "duration", "price"):
                if field in changes:
                    setattr(service, field, changes[field])
            db.commit()
            db.refresh(service)

        logger.info(f"Updated service {service.id}: {sorted(changes)}")
        return service

    @staticmethod
    def set_service_active(
            db: Session,
            business_id: UUID,
            service_id: UUID,
            is_active: bool,
            today: Optional[date] = None
    ) -> Service:
        with storage_errors(db, "update service status"):
            service = BusinessService._owned_service(db, business_id, service_id)

            if service.is_active and not is_active:
                upcoming = BusinessService.count_upcoming_bookings(db, service.id, today)
                if upcoming:
                    db.rollback()
                    raise ServiceInUseError(
                        f"Cannot deactivate a service with {upcoming} upcoming booking(s)"
                    )

            service.is_active = is_active
            db.commit()
            db.refresh(service)

        logger.info(f"Service {service.id} is now {'active' if is_active else 'inactive'}")
        return service

    @staticmethod
    def delete_service(db: Session, business_id: UUID, service_id: UUID, today: Optional[date] = None) -> None:
        """Only services nobody ever booked or waitlisted can be deleted; the rest are deactivated"""
        with storage_errors(db, "delete service"):
            service = BusinessService._owned_service(db, business_id, service_id)

            upcoming = BusinessService.count_upcoming_bookings(db, service.id, today)
            if upcoming:
                db.rollback()
                raise ServiceInUseError(f"Cannot delete a service with {upcoming} upcoming booking(s)")

            referenced = (
                db.query(Booking.id).filter(Booking.service_id == service.id).first()
                or db.query(WaitlistEntry.id).filter(WaitlistEntry.service_id == service.id).first()
            )
            if referenced:
                db.rollback()
                raise ServiceInUseError("The service has booking history; deactivate it instead")

            db.delete(service)
            db.commit()

        logger.info(f"Deleted service {service_id} of business {business_id}")

    @staticmethod
    def _owned_service(db: Session, business_id: UUID, service_id: UUID) -> Service:
        """Service row locked for the rest of the transaction, active or not"""
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.business_id == business_id,
        ).with_for_update().populate_existing().first()
        if not service:
            db.rollback()
            raise ServiceNotFoundError("Service not found for this business")
        return service

    # ------------------------------------------------------------------
    # Public profile (display-only cache)
    # ------------------------------------------------------------------

    @staticmethod
    def build_profile(db: Session, business_id: UUID) -> Dict:
        business = BusinessService.get_active_business(db, business_id)
        profile = business.to_dict()
        profile["operating_hours"] = BusinessService.get_operating_hours(db, business_id)
        profile["services"] = [
            s.to_dict() for s in db.query(Service).filter(
                Service.business_id == business_id,
                Service.is_active.is_(True)
            ).order_by(Service.name.asc()).all()
        ]
        return profile

    @staticmethod
    async def get_business_profile(db: Session, business_id: UUID) -> Dict:
        """Read-through cached profile. Never used for booking decisions."""
        settings = get_settings()
        key = RedisKeys.business_profile(business_id)

        if settings.CACHE_ENABLED:
            try:
                redis_client = await get_redis()
                cached = await redis_client.get(key)
                if cached:
                    return json.loads(cached)
            except (RedisError, ValueError) as e:
                logger.warning(f"Business profile cache read failed for {business_id}: {e}")

        profile = BusinessService.build_profile(db, business_id)

        if settings.CACHE_ENABLED:
            try:
                redis_client = await get_redis()
                await redis_client.set(key, json.dumps(profile), ex=settings.BUSINESS_CACHE_TTL_SECONDS)
            except RedisError as e:
                logger.warning(f"Business profile cache write failed for {business_id}: {e}")

        return profile

    @staticmethod
    async def invalidate_profile_cache(business_id: UUID) -> None:
        if not get_settings().CACHE_ENABLED:
            return
        try:
            redis_client = await get_redis()
            await redis_client.delete(RedisKeys.business_profile(business_id))
        except RedisError as e:
            logger.warning(f"Business profile cache invalidation failed for {business_id}: {e}")
