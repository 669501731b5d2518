"""
Tests for slot generation.
"""
import pytest
from datetime import time

from jongque.models.business import OperatingHours
from jongque.services.availability.time_grid import generate_slots, generate_slots_for_hours


class TestGenerateSlots:
    """Tests for generate_slots."""

    def test_last_slot_must_finish_by_close(self):
        """Should keep only starts whose service ends by closing time."""
        slots = generate_slots(9 * 60, 12 * 60, 60, 30)

        assert slots == [540, 570, 600, 630, 660]

    def test_duration_longer_than_day(self):
        """Should return no slots when the service cannot fit."""
        assert generate_slots(9 * 60, 10 * 60, 90, 30) == []

    def test_exact_fit(self):
        """Should allow a service that ends exactly at closing time."""
        assert generate_slots(9 * 60, 10 * 60, 60, 30) == [540]

    def test_interval_larger_than_duration(self):
        assert generate_slots(9 * 60, 11 * 60, 30, 60) == [540, 600]

    @pytest.mark.parametrize("duration, interval", [(0, 30), (-15, 30), (30, 0)])
    def test_rejects_non_positive_values(self, duration, interval):
        with pytest.raises(ValueError):
            generate_slots(540, 720, duration, interval)


class TestGenerateSlotsForHours:
    """Tests for generate_slots_for_hours."""

    def test_formats_as_hhmm(self):
        hours = OperatingHours(day_of_week=1, open_time=time(9, 0), close_time=time(12, 0), is_open=True)

        slots = generate_slots_for_hours(hours, 60, 30)

        assert slots == ["09:00", "09:30", "10:00", "10:30", "11:00"]

    def test_closed_day_has_no_slots(self):
        hours = OperatingHours(day_of_week=0, open_time=time(9, 0), close_time=time(18, 0), is_open=False)

        assert generate_slots_for_hours(hours, 30) == []

    def test_missing_hours_has_no_slots(self):
        assert generate_slots_for_hours(None, 30) == []
