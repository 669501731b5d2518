"""
Tests for background waitlist promotion.
"""
from uuid import uuid4

from kombu.exceptions import OperationalError

from jongque.config.settings import get_settings
from jongque.models.booking import Booking, BookingStatus
from jongque.models.waitlist import WaitlistEntry, WaitlistStatus
from jongque.services.waitlist.waitlist_service import WaitlistService
from jongque.tasks import waitlist_tasks
from tests.conftest import add_booking


class TestPromoteWaitlistTask:
    """Tests for the promote_waitlist task."""

    def test_promotes_head_when_slot_is_free(self, db, business, service, monday, monkeypatch):
        monkeypatch.setattr(waitlist_tasks, "SessionLocal", lambda: db)
        waiting = uuid4()
        WaitlistService.join(db, waiting, business.id, service.id, monday, "10:00")

        result = waitlist_tasks.promote_waitlist(str(business.id), monday.isoformat(), "10:00")

        assert result["status"] == "promoted"
        booking = db.query(Booking).filter(Booking.customer_id == waiting).one()
        assert booking.booking_number == result["booking_number"]
        entry = db.query(WaitlistEntry).filter(WaitlistEntry.customer_id == waiting).one()
        assert entry.status == WaitlistStatus.CONVERTED

    def test_unchanged_while_slot_is_taken(self, db, business, service, monday, monkeypatch):
        monkeypatch.setattr(waitlist_tasks, "SessionLocal", lambda: db)
        add_booking(db, business, service, monday, booking_time="10:00")
        WaitlistService.join(db, uuid4(), business.id, service.id, monday, "10:00")

        result = waitlist_tasks.promote_waitlist(str(business.id), monday.isoformat(), "10:00")

        assert result == {"status": "unchanged"}

    def test_unpromotable_head_is_dropped(self, db, business, service, monday, monkeypatch):
        """Should finish without raising when the only waiting entry can never convert."""
        monkeypatch.setattr(waitlist_tasks, "SessionLocal", lambda: db)
        entry = WaitlistService.join(db, uuid4(), business.id, service.id, monday, "10:00")
        entry_id = entry.id
        service.is_active = False
        db.commit()

        result = waitlist_tasks.promote_waitlist(str(business.id), monday.isoformat(), "10:00")

        assert result == {"status": "unchanged"}
        entry = db.query(WaitlistEntry).filter(WaitlistEntry.id == entry_id).one()
        assert entry.status == WaitlistStatus.CANCELLED


class TestScheduleWaitlistPromotion:
    """Tests for schedule_waitlist_promotion."""

    def test_disabled_by_setting(self, db, business, service, monday):
        booking = add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CANCELLED)

        assert waitlist_tasks.schedule_waitlist_promotion(booking) is False

    def test_queue_bookings_have_no_slot(self, db, business, service, monday, monkeypatch):
        monkeypatch.setattr(get_settings(), "WAITLIST_AUTO_PROMOTE", True)
        booking = add_booking(db, business, service, monday, queue_number=1, status=BookingStatus.CANCELLED)

        assert waitlist_tasks.schedule_waitlist_promotion(booking) is False

    def test_enqueues_task(self, db, business, service, monday, monkeypatch):
        monkeypatch.setattr(get_settings(), "WAITLIST_AUTO_PROMOTE", True)
        calls = []
        monkeypatch.setattr(waitlist_tasks.promote_waitlist, "delay", lambda *args: calls.append(args))
        booking = add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CANCELLED)

        assert waitlist_tasks.schedule_waitlist_promotion(booking) is True
        assert calls == [(str(business.id), monday.isoformat(), "10:00")]

    def test_broker_unavailable(self, db, business, service, monday, monkeypatch):
        monkeypatch.setattr(get_settings(), "WAITLIST_AUTO_PROMOTE", True)

        def fail(*args):
            raise OperationalError("broker down")

        monkeypatch.setattr(waitlist_tasks.promote_waitlist, "delay", fail)
        booking = add_booking(db, business, service, monday, booking_time="10:00", status=BookingStatus.CANCELLED)

        assert waitlist_tasks.schedule_waitlist_promotion(booking) is False
