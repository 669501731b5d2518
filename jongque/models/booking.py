# jongque/models/booking.py
"""
Booking Model - the central ledger row.

Bookings are never deleted; cancellation is a status. Two storage-level
guarantees back the booking engine:
  * a partial unique index on (business_id, booking_date, queue_number) for
    non-cancelled rows, so no two live bookings share a queue number
  * a BookingDayGuard row per (business_id, booking_date) that is locked while
    a booking is claimed, so interval checks on one day are serialised
"""
from sqlalchemy import (
    Column, String, Integer, Text, Date, DateTime, ForeignKey, Uuid, Index,
    UniqueConstraint, Enum as SQLEnum, text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid
from jongque.models.base import Base


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class BookingType(str, enum.Enum):
    TIME_SLOT = "TIME_SLOT"        # Fixed start time, conflict-checked
    QUEUE_NUMBER = "QUEUE_NUMBER"  # Walk-in style, ordered by queue number


LIVE_QUEUE_NUMBER = text("queue_number IS NOT NULL AND status != 'CANCELLED'")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_number = Column(String(20), nullable=False, unique=True)  # JQ + YYYYMMDD + 4 digits
    booking_type = Column(
        SQLEnum(BookingType, name="bookingtype"),
        default=BookingType.TIME_SLOT,
        nullable=False
    )

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"), nullable=True)

    # Customer info (registered customer or guest)
    customer_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    customer_name = Column(String(200), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(20), nullable=True)
    guest_lookup_token = Column(String(32), nullable=True, unique=True)

    # Schedule
    booking_date = Column(Date, nullable=False)
    booking_time = Column(String(5), nullable=True)  # "HH:MM"; empty for queue bookings
    estimated_duration = Column(Integer, nullable=False)  # minutes
    queue_number = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    # Status tracking
    status = Column(
        SQLEnum(BookingStatus, name="bookingstatus"),
        default=BookingStatus.CONFIRMED,
        nullable=False
    )
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    business = relationship("Business")
    service = relationship("Service")
    staff = relationship("Staff")

    __table_args__ = (
        Index("ix_bookings_business_date", "business_id", "booking_date"),
        Index(
            "uq_bookings_live_queue_number",
            "business_id",
            "booking_date",
            "queue_number",
            unique=True,
            postgresql_where=LIVE_QUEUE_NUMBER,
            sqlite_where=LIVE_QUEUE_NUMBER,
        ),
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, number={self.booking_number}, status={self.status})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "booking_number": self.booking_number,
            "booking_type": self.booking_type.value,
            "business_id": str(self.business_id),
            "service_id": str(self.service_id),
            "staff_id": str(self.staff_id) if self.staff_id else None,
            "customer_id": str(self.customer_id) if self.customer_id else None,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "booking_date": self.booking_date.isoformat(),
            "booking_time": self.booking_time,
            "estimated_duration": self.estimated_duration,
            "queue_number": self.queue_number,
            "status": self.status.value,
            "notes": self.notes,
            "actual_start_time": self.actual_start_time.isoformat() if self.actual_start_time else None,
            "actual_end_time": self.actual_end_time.isoformat() if self.actual_end_time else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class BookingDayGuard(Base):
    """Lock row for one (business, date) booking partition"""
    __tablename__ = "booking_day_guards"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    booking_date = Column(Date, nullable=False)
    claims = Column(Integer, default=0, nullable=False)  # bookings claimed through this guard

    __table_args__ = (
        UniqueConstraint("business_id", "booking_date", name="uq_booking_day_guards_partition"),
    )
