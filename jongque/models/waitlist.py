# jongque/models/waitlist.py
from sqlalchemy import Column, String, Integer, Text, Date, DateTime, ForeignKey, Uuid, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid
from jongque.models.base import Base


class WaitlistStatus(str, enum.Enum):
    WAITING = "WAITING"
    CANCELLED = "CANCELLED"
    CONVERTED = "CONVERTED"  # Turned into a booking


class WaitlistEntry(Base):
    """
    A customer waiting for a full (business, date, time) slot.
    Positions of WAITING entries in a partition always form 1..N.
    """
    __tablename__ = "waitlist_entries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=False)
    staff_id = Column(Uuid(as_uuid=True), ForeignKey("staff.id"), nullable=True)
    customer_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    booking_date = Column(Date, nullable=False)
    booking_time = Column(String(5), nullable=False)  # "HH:MM"
    position = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(
        SQLEnum(WaitlistStatus, name="waitliststatus"),
        default=WaitlistStatus.WAITING,
        nullable=False
    )
    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id"), nullable=True)  # Set on conversion

    joined_at = Column(DateTime(timezone=True), server_default=func.now())
    left_at = Column(DateTime(timezone=True), nullable=True)
    converted_at = Column(DateTime(timezone=True), nullable=True)

    business = relationship("Business")
    service = relationship("Service")
    staff = relationship("Staff")

    __table_args__ = (
        Index("ix_waitlist_partition", "business_id", "booking_date", "booking_time", "status"),
    )

    def to_dict(self):
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "service_id": str(self.service_id),
            "staff_id": str(self.staff_id) if self.staff_id else None,
            "customer_id": str(self.customer_id),
            "booking_date": self.booking_date.isoformat(),
            "booking_time": self.booking_time,
            "position": self.position,
            "status": self.status.value,
            "notes": self.notes,
            "booking_id": str(self.booking_id) if self.booking_id else None,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
            "left_at": self.left_at.isoformat() if self.left_at else None,
            "converted_at": self.converted_at.isoformat() if self.converted_at else None,
        }
