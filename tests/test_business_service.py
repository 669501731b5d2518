"""
Tests for operating hours, holidays and the business profile.
"""
import asyncio
import pytest
from datetime import time, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from jongque.core.exceptions import (
    BusinessNotFoundError,
    InvalidRequestError,
    NotFoundError,
    ServiceInUseError,
    ServiceNotFoundError,
)
from jongque.models.booking import BookingStatus
from jongque.services.business.business_service import BusinessService
from tests.conftest import add_booking


def _week(open_time=time(10, 0), close_time=time(20, 0), closed_days=(0,)):
    return [
        {
            "day_of_week": day,
            "open_time": open_time,
            "close_time": close_time,
            "is_open": day not in closed_days,
        }
        for day in range(7)
    ]


class TestOperatingHours:
    """Tests for operating hours replacement."""

    def test_read_week_in_day_order(self, db, business):
        hours = BusinessService.get_operating_hours(db, business.id)

        assert len(hours) == 7
        assert hours[0]["is_open"] is False
        assert hours[1] == {"day_of_week": 1, "open_time": "09:00", "close_time": "18:00", "is_open": True}

    def test_replace_whole_week(self, db, business):
        hours = BusinessService.replace_operating_hours(db, business.id, _week(closed_days=(0, 6)))

        assert [h["is_open"] for h in hours] == [False, True, True, True, True, True, False]
        assert hours[3]["open_time"] == "10:00"
        assert hours[3]["close_time"] == "20:00"

    def test_partial_week_rejected(self, db, business):
        with pytest.raises(InvalidRequestError):
            BusinessService.replace_operating_hours(db, business.id, _week()[:6])

        assert len(BusinessService.get_operating_hours(db, business.id)) == 7

    def test_duplicate_day_rejected(self, db, business):
        week = _week()
        week[6]["day_of_week"] = 5

        with pytest.raises(InvalidRequestError):
            BusinessService.replace_operating_hours(db, business.id, week)

    def test_close_before_open_rejected(self, db, business):
        with pytest.raises(InvalidRequestError):
            BusinessService.replace_operating_hours(
                db, business.id, _week(open_time=time(18, 0), close_time=time(9, 0))
            )

        hours = BusinessService.get_operating_hours(db, business.id)
        assert hours[1]["open_time"] == "09:00"


class TestHolidays:
    """Tests for holiday management."""

    def test_add_list_delete(self, db, business, monday):
        holiday = BusinessService.add_holiday(db, business.id, "Songkran", monday, is_recurring=True)

        assert BusinessService.list_holidays(db, business.id) == [holiday]
        assert BusinessService.find_holiday(db, business.id, monday).name == "Songkran"

        BusinessService.delete_holiday(db, business.id, UUID(holiday["id"]))

        assert BusinessService.list_holidays(db, business.id) == []

    def test_recurring_holiday_matches_other_years(self, db, business, monday):
        BusinessService.add_holiday(db, business.id, "New Year", monday, is_recurring=True)
        next_year = monday.replace(year=monday.year + 4)

        assert BusinessService.find_holiday(db, business.id, next_year) is not None
        assert BusinessService.find_holiday(db, business.id, monday + timedelta(days=1)) is None

    def test_delete_unknown_holiday(self, db, business):
        with pytest.raises(NotFoundError):
            BusinessService.delete_holiday(db, business.id, uuid4())


class TestBusinessProfile:
    """Tests for the public profile."""

    def test_profile_includes_hours_and_services(self, db, business, service):
        profile = asyncio.run(BusinessService.get_business_profile(db, business.id))

        assert profile["name"] == "Test Barber"
        assert len(profile["operating_hours"]) == 7
        assert [s["name"] for s in profile["services"]] == ["Haircut"]

    def test_unknown_business(self, db):
        with pytest.raises(BusinessNotFoundError):
            asyncio.run(BusinessService.get_business_profile(db, uuid4()))


class TestServiceCatalogue:
    """Tests for creating, editing, deactivating and deleting services."""

    def test_create_and_list(self, db, business, service):
        created = BusinessService.create_service(db, business.id, "Hair Wash", 20, price=Decimal("80.00"))

        names = [s["name"] for s in BusinessService.list_services(db, business.id)]

        assert created.is_active is True
        assert set(names) == {"Haircut", "Hair Wash"}

    def test_inactive_services_listed_last(self, db, business, service, short_service):
        BusinessService.set_service_active(db, business.id, service.id, False)

        listed = BusinessService.list_services(db, business.id)

        assert [s["name"] for s in listed] == ["Beard Trim", "Haircut"]
        assert listed[-1]["is_active"] is False

    def test_free_edit_without_bookings(self, db, business, service):
        updated = BusinessService.update_service(db, business.id, service.id, {"name": "Cut", "duration": 45})

        assert updated.name == "Cut"
        assert updated.duration == 45

    def test_duration_frozen_while_booked(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00")

        with pytest.raises(ServiceInUseError):
            BusinessService.update_service(db, business.id, service.id, {"duration": 90})

        db.refresh(service)
        assert service.duration == 60

    def test_price_and_description_editable_while_booked(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00")

        updated = BusinessService.update_service(
            db, business.id, service.id,
            {"price": Decimal("300.00"), "description": "Wash included", "duration": 60}
        )

        assert updated.price == Decimal("300.00")
        assert updated.description == "Wash included"

    def test_deactivate_refused_while_booked(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CHECKED_IN)

        with pytest.raises(ServiceInUseError):
            BusinessService.set_service_active(db, business.id, service.id, False)

        db.refresh(service)
        assert service.is_active is True

    def test_finished_and_past_bookings_do_not_block(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.COMPLETED)
        add_booking(db, business, service, monday, booking_time="12:00", status=BookingStatus.CANCELLED)
        add_booking(db, business, service, monday - timedelta(days=14), booking_time="10:00")

        updated = BusinessService.set_service_active(db, business.id, service.id, False)

        assert updated.is_active is False

    def test_reactivate(self, db, business, service):
        BusinessService.set_service_active(db, business.id, service.id, False)

        assert BusinessService.set_service_active(db, business.id, service.id, True).is_active is True

    def test_delete_unused_service(self, db, business, service):
        BusinessService.delete_service(db, business.id, service.id)

        assert BusinessService.list_services(db, business.id) == []

    def test_delete_refused_while_booked(self, db, business, service, monday):
        add_booking(db, business, service, monday, booking_time="10:00")

        with pytest.raises(ServiceInUseError):
            BusinessService.delete_service(db, business.id, service.id)

    def test_delete_refused_with_history(self, db, business, service, monday):
        """Should keep services that old bookings point at; deactivation is the way out."""
        add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.COMPLETED)

        with pytest.raises(ServiceInUseError):
            BusinessService.delete_service(db, business.id, service.id)

    def test_other_business_service_not_found(self, db, business, other_business, service):
        with pytest.raises(ServiceNotFoundError):
            BusinessService.set_service_active(db, other_business.id, service.id, False)

    def test_inactive_service_cannot_be_booked(self, db, business, service, monday):
        BusinessService.set_service_active(db, business.id, service.id, False)

        with pytest.raises(ServiceNotFoundError):
            BusinessService.get_service_for_business(db, business.id, service.id)
