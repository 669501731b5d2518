# jongque/models/business.py
"""
Business, its weekly operating hours and its holidays
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Date, Time, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from jongque.models.base import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    operating_hours = relationship(
        "OperatingHours",
        back_populates="business",
        order_by="OperatingHours.day_of_week",
        cascade="all, delete-orphan",
    )
    holidays = relationship("Holiday", back_populates="business", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="business")
    staff = relationship("Staff", back_populates="business")

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "phone": self.phone,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class OperatingHours(Base):
    """One row per (business, day of week). Replaced wholesale on update."""
    __tablename__ = "operating_hours"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)
    is_open = Column(Boolean, default=True, nullable=False)

    business = relationship("Business", back_populates="operating_hours")

    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_operating_hours_business_day"),
    )

    def to_dict(self):
        return {
            "day_of_week": self.day_of_week,
            "open_time": self.open_time.strftime("%H:%M"),
            "close_time": self.close_time.strftime("%H:%M"),
            "is_open": self.is_open,
        }


class Holiday(Base):
    """Date on which the business is closed regardless of its weekly hours"""
    __tablename__ = "holidays"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(String(200), nullable=False)
    date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)  # Same month/day every year

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    business = relationship("Business", back_populates="holidays")

    __table_args__ = (
        Index("ix_holidays_business_date", "business_id", "date"),
    )

    def matches(self, day) -> bool:
        if self.is_recurring:
            return (self.date.month, self.date.day) == (day.month, day.day)
        return self.date == day

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "date": self.date.isoformat(),
            "is_recurring": self.is_recurring,
        }
