"""
Domain models for slots, busy intervals, schedules and previews.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidArgument
from .timezones import parse_time_of_day, resolve_timezone, to_instant


class DayOfWeek(str, Enum):
    """Weekday labels, indexed from 0 = SUNDAY to 6 = SATURDAY."""

    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @property
    def number(self) -> int:
        return _DAY_ORDER.index(self)

    @classmethod
    def from_index(cls, index: int) -> "DayOfWeek":
        if not 0 <= index <= 6:
            raise InvalidArgument(f"Day of week must be between 0 and 6, got {index}")
        return _DAY_ORDER[index]

    @classmethod
    def for_date(cls, day: date) -> "DayOfWeek":
        """Weekday of a calendar date; independent of any timezone."""
        return _DAY_ORDER[day.isoweekday() % 7]


_DAY_ORDER = list(DayOfWeek)


@dataclass(frozen=True)
class TimeSlot:
    """
    A fixed-duration bookable candidate interval.

    ``time_string`` is the start's wall-clock time (``HH:MM``) in the
    display timezone active when the slot was last labelled.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime
    time_string: str

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidArgument(f"Slot start {self.start} must be before end {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
            "timeString": self.time_string,
        }


@dataclass(frozen=True)
class BusyBlock:
    """
    An externally sourced occupied interval.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime
    calendar_id: Optional[str] = None
    provider: Optional[str] = None

    def __post_init__(self):
        # Accept plain datetimes from collaborators; store UTC pendulum instants
        object.__setattr__(self, "start", to_instant(self.start))
        object.__setattr__(self, "end", to_instant(self.end))
        if self.start >= self.end:
            raise InvalidArgument(f"Busy block start {self.start} must be before end {self.end}")

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Check if the block intersects ``[range_start, range_end)``."""
        return self.start < to_instant(range_end) and self.end > to_instant(range_start)


@dataclass(frozen=True)
class AvailabilitySettings:
    """
    Immutable policy snapshot for one computation.

    buffer_time and minimum_notice are minutes, booking_window is days.
    """
    timezone: str = "UTC"
    buffer_time: int = 0
    minimum_notice: int = 0
    booking_window: int = 60

    def __post_init__(self):
        resolve_timezone(self.timezone)
        for name in ("buffer_time", "minimum_notice", "booking_window"):
            if getattr(self, name) < 0:
                raise InvalidArgument(f"{name} must not be negative, got {getattr(self, name)}")


TimeOfDayLike = Union[str, time, datetime]


def _time_of_day_string(value: TimeOfDayLike) -> str:
    if isinstance(value, datetime):
        # Persisted rows store a time of day as a UTC timestamp
        return pendulum.instance(value).in_timezone(pendulum.UTC).format("HH:mm")
    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"
    return value


@dataclass(frozen=True)
class DaySchedule:
    """
    One weekday's recurring template entry.

    ``day_of_week`` runs from 0 = SUNDAY to 6 = SATURDAY.
    """
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool = True

    def __post_init__(self):
        DayOfWeek.from_index(self.day_of_week)
        parse_time_of_day(self.start_time)
        parse_time_of_day(self.end_time)

    @property
    def day(self) -> DayOfWeek:
        return DayOfWeek.from_index(self.day_of_week)

    @classmethod
    def from_day_availability(
        cls,
        day: Union[DayOfWeek, str],
        start_time: TimeOfDayLike,
        end_time: TimeOfDayLike,
        is_available: bool = True,
    ) -> "DaySchedule":
        """
        Build a schedule entry from a persisted per-weekday row.

        Args:
            day: Weekday label (``"MONDAY"``) or ``DayOfWeek`` member
            start_time: Opening time as ``HH:MM``, ``time`` or UTC ``datetime``
            end_time: Closing time, same forms as ``start_time``
            is_available: Whether the day is bookable at all

        Raises:
            InvalidArgument: If the day label or a time is invalid
        """
        try:
            weekday = DayOfWeek(day.upper() if isinstance(day, str) else day)
        except ValueError as exc:
            raise InvalidArgument(f"Unknown day of week: {day!r}") from exc

        return cls(
            day_of_week=weekday.number,
            start_time=_time_of_day_string(start_time),
            end_time=_time_of_day_string(end_time),
            is_available=is_available,
        )


@dataclass(frozen=True)
class DayPreview:
    """Availability of one calendar day in a preview."""
    date: str  # YYYY-MM-DD
    day_of_week: DayOfWeek
    slots: List[TimeSlot] = field(default_factory=list)
    is_available: bool = False
    time_ranges: List[str] = field(default_factory=list)

    def format_display(self) -> str:
        """
        Format the day for display.
        Format: MONDAY, YYYY-MM-DD | 09:00 - 12:00, 13:00 - 16:00
        """
        ranges = ", ".join(self.time_ranges) if self.time_ranges else "unavailable"
        return f"{self.day_of_week.value}, {self.date} | {ranges}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "dayOfWeek": self.day_of_week.value,
            "slots": [slot.to_dict() for slot in self.slots],
            "isAvailable": self.is_available,
            "timeRanges": list(self.time_ranges),
        }


@dataclass(frozen=True)
class AvailabilityPreview:
    """Aggregated multi-day availability report."""
    days: List[DayPreview]
    total_slots: int
    total_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "days": [day.to_dict() for day in self.days],
            "totalSlots": self.total_slots,
            "totalHours": self.total_hours,
        }
