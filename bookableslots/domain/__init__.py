"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import AvailabilityError, CalendarDataError, InvalidArgument, InvalidTimezone
from .models import (
    AvailabilityPreview,
    AvailabilitySettings,
    BusyBlock,
    DayOfWeek,
    DayPreview,
    DaySchedule,
    TimeSlot,
)
from .preview import group_slots_into_ranges
from .slot_calculator import (
    compute_availability,
    exclude_beyond_window,
    exclude_busy,
    exclude_too_soon,
    generate_slots,
    relabel,
)

__all__ = [
    "AvailabilityError",
    "CalendarDataError",
    "InvalidArgument",
    "InvalidTimezone",
    "AvailabilityPreview",
    "AvailabilitySettings",
    "BusyBlock",
    "DayOfWeek",
    "DayPreview",
    "DaySchedule",
    "TimeSlot",
    "group_slots_into_ranges",
    "compute_availability",
    "exclude_beyond_window",
    "exclude_busy",
    "exclude_too_soon",
    "generate_slots",
    "relabel",
]
