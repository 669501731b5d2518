"""
Test configuration and fixtures.
"""
import os
import pytest
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Generator
from uuid import UUID, uuid4
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient
from jose import jwt

# Test settings must be in place before the application is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"
os.environ["WAITLIST_AUTO_PROMOTE"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["JWT_ALGORITHM"] = "HS256"

from jongque.main import app
from jongque.config.database import engine, SessionLocal, get_db
from jongque.models import Base, Business, Service, Staff, Booking, BookingStatus, BookingType
from jongque.models.business import OperatingHours
from jongque.utils.time_utils import sunday_based_weekday


def next_weekday(day_of_week: int, weeks_ahead: int = 1) -> date:
    """A future date on the given day (0=Sunday ... 6=Saturday)"""
    day = date.today() + timedelta(days=1)
    while sunday_based_weekday(day) != day_of_week:
        day += timedelta(days=1)
    return day + timedelta(weeks=weeks_ahead - 1)


def make_token(user_id: UUID, business_id: UUID = None, expires_in: int = 3600) -> str:
    claims = {
        "sub": str(user_id),
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    if business_id:
        claims["business_id"] = str(business_id)
    return jwt.encode(claims, os.environ["JWT_SECRET_KEY"], algorithm="HS256")


def add_booking(
        db: Session,
        business: Business,
        service: Service,
        booking_date: date,
        booking_time: str = None,
        queue_number: int = None,
        status: BookingStatus = BookingStatus.CONFIRMED,
        staff: Staff = None,
        customer_id: UUID = None,
        duration: int = None
) -> Booking:
    """Insert a ledger row directly, bypassing the booking rules"""
    booking = Booking(
        booking_number=f"JQ{uuid4().hex[:12].upper()}",
        booking_type=BookingType.QUEUE_NUMBER if queue_number else BookingType.TIME_SLOT,
        business_id=business.id,
        service_id=service.id,
        staff_id=staff.id if staff else None,
        customer_id=customer_id or uuid4(),
        booking_date=booking_date,
        booking_time=booking_time,
        estimated_duration=duration or service.duration,
        queue_number=queue_number,
        status=status,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema and session for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def business(db: Session) -> Business:
    """Active business open 09:00-18:00 Monday to Saturday, closed Sunday."""
    business = Business(name="Test Barber", phone="+66800000000", is_active=True)
    db.add(business)
    db.commit()
    db.refresh(business)

    for day in range(7):
        db.add(OperatingHours(
            business_id=business.id,
            day_of_week=day,
            open_time=time(9, 0),
            close_time=time(18, 0),
            is_open=day != 0,
        ))
    db.commit()
    return business


@pytest.fixture
def service(db: Session, business: Business) -> Service:
    service = Service(
        business_id=business.id,
        name="Haircut",
        price=Decimal("250.00"),
        duration=60,
        is_active=True
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def short_service(db: Session, business: Business) -> Service:
    service = Service(
        business_id=business.id,
        name="Beard Trim",
        price=Decimal("120.00"),
        duration=30,
        is_active=True
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def staff(db: Session, business: Business) -> Staff:
    staff = Staff(business_id=business.id, name="Somchai", is_active=True)
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


@pytest.fixture
def other_business(db: Session) -> Business:
    business = Business(name="Other Salon", is_active=True)
    db.add(business)
    db.commit()
    db.refresh(business)
    return business


@pytest.fixture
def monday() -> date:
    return next_weekday(1)


@pytest.fixture
def customer_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(customer_id: UUID) -> dict:
    return {"Authorization": f"Bearer {make_token(customer_id)}"}


@pytest.fixture
def dashboard_headers(business: Business) -> dict:
    return {"Authorization": f"Bearer {make_token(uuid4(), business_id=business.id)}"}
