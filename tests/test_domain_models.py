"""
Tests for domain models.
"""

from datetime import datetime, time, timezone

import pendulum
import pytest

from bookableslots.domain.exceptions import InvalidArgument, InvalidTimezone
from bookableslots.domain.models import (
    AvailabilityPreview,
    AvailabilitySettings,
    BusyBlock,
    DayOfWeek,
    DayPreview,
    DaySchedule,
    TimeSlot,
)


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def test_create_valid_slot(self):
        """Test creating a valid slot."""
        start = pendulum.parse("2025-01-27T09:00:00Z")
        end = pendulum.parse("2025-01-27T10:00:00Z")

        slot = TimeSlot(start=start, end=end, time_string="09:00")

        assert slot.duration_minutes() == 60

    def test_invalid_slot_raises_error(self):
        """Test that a slot ending before it starts is rejected."""
        start = pendulum.parse("2025-01-27T10:00:00Z")
        end = pendulum.parse("2025-01-27T09:00:00Z")

        with pytest.raises(InvalidArgument, match="must be before end"):
            TimeSlot(start=start, end=end, time_string="10:00")

    def test_to_dict(self):
        """Test serialisation uses the wire field names."""
        slot = TimeSlot(
            start=pendulum.parse("2025-01-27T09:00:00Z"),
            end=pendulum.parse("2025-01-27T09:30:00Z"),
            time_string="09:00",
        )

        data = slot.to_dict()

        assert data["timeString"] == "09:00"
        assert data["start"].startswith("2025-01-27T09:00:00")


class TestBusyBlock:
    """Tests for BusyBlock model."""

    def test_plain_datetimes_are_normalised_to_utc(self):
        """Test stdlib datetimes are stored as UTC pendulum instants."""
        block = BusyBlock(
            start=datetime(2025, 1, 27, 10, 0, tzinfo=timezone.utc),
            end=datetime(2025, 1, 27, 11, 0),  # naive -> UTC
            calendar_id="cal1",
        )

        assert block.start == pendulum.parse("2025-01-27T10:00:00Z")
        assert block.end == pendulum.parse("2025-01-27T11:00:00Z")
        assert block.start.timezone_name == "UTC"

    def test_invalid_block_raises_error(self):
        """Test that an empty busy block is rejected."""
        moment = pendulum.parse("2025-01-27T10:00:00Z")

        with pytest.raises(InvalidArgument):
            BusyBlock(start=moment, end=moment)

    def test_overlaps(self):
        """Test range intersection is half-open."""
        block = BusyBlock(
            start=pendulum.parse("2025-01-27T10:00:00Z"),
            end=pendulum.parse("2025-01-27T11:00:00Z"),
        )

        assert block.overlaps(
            pendulum.parse("2025-01-27T10:30:00Z"), pendulum.parse("2025-01-27T12:00:00Z")
        )
        assert not block.overlaps(
            pendulum.parse("2025-01-27T11:00:00Z"), pendulum.parse("2025-01-27T12:00:00Z")
        )
        assert not block.overlaps(
            pendulum.parse("2025-01-27T09:00:00Z"), pendulum.parse("2025-01-27T10:00:00Z")
        )


class TestAvailabilitySettings:
    """Tests for AvailabilitySettings model."""

    def test_unknown_timezone_fails_fast(self):
        """Test an unknown zone is rejected on construction."""
        with pytest.raises(InvalidTimezone):
            AvailabilitySettings(timezone="Mars/Olympus_Mons")

    def test_negative_buffer_rejected(self):
        """Test negative policy values are rejected."""
        with pytest.raises(InvalidArgument, match="buffer_time"):
            AvailabilitySettings(timezone="UTC", buffer_time=-5)


class TestDayOfWeek:
    """Tests for weekday numbering."""

    def test_sunday_is_zero(self):
        """Test the 0 = SUNDAY numbering."""
        assert DayOfWeek.SUNDAY.number == 0
        assert DayOfWeek.SATURDAY.number == 6
        assert DayOfWeek.from_index(1) is DayOfWeek.MONDAY

    def test_for_date(self):
        """Test weekday resolution from calendar dates."""
        assert DayOfWeek.for_date(pendulum.date(2025, 1, 27)) is DayOfWeek.MONDAY
        assert DayOfWeek.for_date(pendulum.date(2025, 2, 2)) is DayOfWeek.SUNDAY

    def test_out_of_range_index(self):
        """Test invalid indices are rejected."""
        with pytest.raises(InvalidArgument):
            DayOfWeek.from_index(7)


class TestDaySchedule:
    """Tests for DaySchedule model."""

    def test_invalid_time_format(self):
        """Test malformed times are rejected."""
        with pytest.raises(InvalidArgument, match="HH:MM"):
            DaySchedule(day_of_week=1, start_time="9am", end_time="17:00")

    def test_invalid_day_of_week(self):
        """Test days outside 0..6 are rejected."""
        with pytest.raises(InvalidArgument):
            DaySchedule(day_of_week=9, start_time="09:00", end_time="17:00")

    def test_from_day_availability_with_utc_timestamps(self):
        """Test conversion from a persisted row storing UTC timestamps."""
        schedule = DaySchedule.from_day_availability(
            "MONDAY",
            pendulum.parse("2025-01-01T09:00:00Z"),
            pendulum.parse("2025-01-01T17:30:00Z"),
            True,
        )

        assert schedule.day_of_week == 1
        assert schedule.start_time == "09:00"
        assert schedule.end_time == "17:30"
        assert schedule.is_available

    def test_from_day_availability_with_time_values(self):
        """Test conversion from time objects and lower-case labels."""
        schedule = DaySchedule.from_day_availability("friday", time(8, 5), "12:00", False)

        assert schedule.day is DayOfWeek.FRIDAY
        assert schedule.start_time == "08:05"
        assert not schedule.is_available

    def test_from_day_availability_unknown_day(self):
        """Test unknown labels are rejected."""
        with pytest.raises(InvalidArgument, match="Unknown day"):
            DaySchedule.from_day_availability("FUNDAY", "09:00", "17:00")


class TestPreviewModels:
    """Tests for preview serialisation and display."""

    def test_day_preview_display(self):
        """Test the display format lists ranges."""
        day = DayPreview(
            date="2025-01-27",
            day_of_week=DayOfWeek.MONDAY,
            is_available=True,
            time_ranges=["09:00 - 11:00", "13:00 - 16:00"],
        )

        assert day.format_display() == "MONDAY, 2025-01-27 | 09:00 - 11:00, 13:00 - 16:00"

    def test_unavailable_day_display(self):
        """Test the display format of a day without ranges."""
        day = DayPreview(date="2025-02-01", day_of_week=DayOfWeek.SATURDAY)

        assert day.format_display() == "SATURDAY, 2025-02-01 | unavailable"

    def test_preview_to_dict(self):
        """Test serialisation of the whole preview."""
        preview = AvailabilityPreview(
            days=[DayPreview(date="2025-02-01", day_of_week=DayOfWeek.SATURDAY)],
            total_slots=0,
            total_hours=0.0,
        )

        data = preview.to_dict()

        assert data["totalSlots"] == 0
        assert data["days"][0]["dayOfWeek"] == "SATURDAY"
        assert data["days"][0]["isAvailable"] is False
