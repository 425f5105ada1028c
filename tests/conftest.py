"""
Shared fixtures for availability tests.
"""

import pendulum
import pytest

from bookableslots.domain.models import AvailabilitySettings, DaySchedule


@pytest.fixture
def base_schedule() -> DaySchedule:
    """Monday, 09:00 - 17:00."""
    return DaySchedule(day_of_week=1, start_time="09:00", end_time="17:00", is_available=True)


@pytest.fixture
def weekday_template():
    """Monday to Friday, 09:00 - 17:00."""
    return [
        DaySchedule(day_of_week=day, start_time="09:00", end_time="17:00", is_available=True)
        for day in range(1, 6)
    ]


@pytest.fixture
def monday_morning():
    """Monday, Jan 27, 2025 10:00 UTC."""
    return pendulum.parse("2025-01-27T10:00:00Z")


@pytest.fixture
def utc_settings() -> AvailabilitySettings:
    return AvailabilitySettings(timezone="UTC", buffer_time=0, minimum_notice=0, booking_window=7)
