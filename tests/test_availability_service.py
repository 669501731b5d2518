"""
Tests for availability planning.
"""
import pytest
from datetime import time
from uuid import uuid4

from jongque.core.exceptions import BusinessNotFoundError, ServiceNotFoundError
from jongque.models.booking import BookingStatus
from jongque.models.business import Holiday, OperatingHours
from jongque.services.availability.availability_service import AvailabilityService
from jongque.services.waitlist.waitlist_service import WaitlistService
from tests.conftest import add_booking, next_weekday


@pytest.fixture
def morning_only(db, business):
    """Monday hours shortened to 09:00-12:00."""
    hours = db.query(OperatingHours).filter(
        OperatingHours.business_id == business.id,
        OperatingHours.day_of_week == 1,
    ).one()
    hours.open_time = time(9, 0)
    hours.close_time = time(12, 0)
    db.commit()
    return hours


def _slot_map(result):
    return {slot["time"]: slot["available"] for slot in result["slots"]}


class TestPlanAvailability:
    """Tests for AvailabilityService.plan_availability."""

    def test_empty_day(self, db, business, service, monday, morning_only):
        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert result["status"] == "open"
        assert _slot_map(result) == {
            "09:00": True, "09:30": True, "10:00": True, "10:30": True, "11:00": True,
        }
        assert result["next_queue_number"] == 1
        assert result["operating_hours"] == {"open_time": "09:00", "close_time": "12:00"}

    def test_booking_blocks_overlapping_starts(self, db, business, service, monday, morning_only):
        """Should mark every start overlapping the 10:00-11:00 booking unavailable."""
        add_booking(db, business, service, monday, booking_time="10:00")

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert _slot_map(result) == {
            "09:00": True, "09:30": False, "10:00": False, "10:30": False, "11:00": True,
        }

    def test_cancelled_booking_frees_slots(self, db, business, service, monday, morning_only):
        add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CANCELLED)

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert all(_slot_map(result).values())

    def test_next_queue_number(self, db, business, service, monday):
        add_booking(db, business, service, monday, queue_number=1)
        add_booking(db, business, service, monday, queue_number=2)

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert result["next_queue_number"] == 3

    def test_waitlist_counts_per_slot(self, db, business, service, monday, morning_only):
        add_booking(db, business, service, monday, booking_time="10:00")
        WaitlistService.join(db, uuid4(), business.id, service.id, monday, "10:00")
        WaitlistService.join(db, uuid4(), business.id, service.id, monday, "10:00")

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        counts = {slot["time"]: slot["waitlist_count"] for slot in result["slots"]}
        assert counts["10:00"] == 2
        assert counts["09:00"] == 0

    def test_closed_day(self, db, business, service):
        sunday = next_weekday(0)

        result = AvailabilityService.plan_availability(db, business.id, service.id, sunday)

        assert result["status"] == "closed"
        assert result["slots"] == []
        assert result["message"]

    def test_holiday(self, db, business, service, monday):
        db.add(Holiday(business_id=business.id, name="Songkran", date=monday, is_recurring=False))
        db.commit()

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert result["status"] == "holiday"
        assert result["slots"] == []
        assert "Songkran" in result["message"]

    def test_recurring_holiday_applies_every_year(self, db, business, service, monday):
        db.add(Holiday(
            business_id=business.id,
            name="Founders Day",
            date=monday.replace(year=monday.year - 4),
            is_recurring=True
        ))
        db.commit()

        result = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert result["status"] == "holiday"

    def test_unknown_business(self, db, service, monday):
        with pytest.raises(BusinessNotFoundError):
            AvailabilityService.plan_availability(db, uuid4(), service.id, monday)

    def test_inactive_business(self, db, business, service, monday):
        business.is_active = False
        db.commit()

        with pytest.raises(BusinessNotFoundError):
            AvailabilityService.plan_availability(db, business.id, service.id, monday)

    def test_service_of_other_business(self, db, business, other_business, service, monday):
        db.add(OperatingHours(
            business_id=other_business.id, day_of_week=1,
            open_time=time(9, 0), close_time=time(18, 0), is_open=True
        ))
        db.commit()

        with pytest.raises(ServiceNotFoundError):
            AvailabilityService.plan_availability(db, other_business.id, service.id, monday)

    def test_read_only_and_idempotent(self, db, business, service, monday, morning_only):
        add_booking(db, business, service, monday, booking_time="10:00")

        first = AvailabilityService.plan_availability(db, business.id, service.id, monday)
        second = AvailabilityService.plan_availability(db, business.id, service.id, monday)

        assert first == second
