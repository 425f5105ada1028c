"""
Aggregation helpers for the multi-day availability preview.
"""

import math
from datetime import datetime
from typing import List, Optional, Sequence

from pendulum import DateTime

from .models import (
    AvailabilityPreview,
    AvailabilitySettings,
    BusyBlock,
    DayOfWeek,
    DayPreview,
    DaySchedule,
    TimeSlot,
)
from .slot_calculator import compute_availability

# Slots separated by at most this many minutes share one display range
RANGE_MERGE_GAP_MINUTES = 60


def group_slots_into_ranges(
    slots: Sequence[TimeSlot],
    max_gap_minutes: int = RANGE_MERGE_GAP_MINUTES,
) -> List[str]:
    """
    Group consecutive slots into human-readable ``"start - end"`` labels.

    Labels use the slot start times, so a lone slot reads ``"09:00 - 09:00"``.

    Example:
    Slots: 09:00, 10:00, 11:30 (60 min each, max gap 60)
    Result: ["09:00 - 11:30"]
    """
    if not slots:
        return []

    ranges: List[str] = []
    range_start = slots[0].time_string
    range_end = slots[0].time_string

    for previous, current in zip(slots, slots[1:]):
        gap_minutes = (current.start - previous.end).total_seconds() / 60

        if gap_minutes <= max_gap_minutes:
            range_end = current.time_string
        else:
            ranges.append(f"{range_start} - {range_end}")
            range_start = current.time_string
            range_end = current.time_string

    ranges.append(f"{range_start} - {range_end}")

    return ranges


def find_day_schedule(
    weekly_template: Sequence[DaySchedule],
    day_of_week: DayOfWeek,
) -> Optional[DaySchedule]:
    """Find the template entry for a weekday; None if the day is missing."""
    for schedule in weekly_template:
        if schedule.day_of_week == day_of_week.number:
            return schedule
    return None


def busy_blocks_for_day(
    busy_blocks: Sequence[BusyBlock],
    day_start: datetime,
    day_end: datetime,
) -> List[BusyBlock]:
    """Blocks whose start falls within ``[day_start, day_end)``."""
    return [block for block in busy_blocks if day_start <= block.start < day_end]


def build_day_preview(
    day_start: DateTime,
    weekly_template: Sequence[DaySchedule],
    slot_duration_minutes: int,
    gap_minutes: int,
    settings: AvailabilitySettings,
    busy_blocks: Sequence[BusyBlock],
    now: datetime,
) -> DayPreview:
    """
    Build the preview of one calendar day.

    Args:
        day_start: Midnight of the day, in the settings timezone
        weekly_template: Day-of-week keyed schedule entries
        slot_duration_minutes: Length of every slot
        gap_minutes: Gap between consecutive slots
        settings: Availability policy
        busy_blocks: All busy blocks of the preview range
        now: The current instant
    """
    day_of_week = DayOfWeek.for_date(day_start.date())
    date_str = day_start.format("YYYY-MM-DD")
    schedule = find_day_schedule(weekly_template, day_of_week)

    if schedule is None:
        return DayPreview(date=date_str, day_of_week=day_of_week)

    day_blocks = busy_blocks_for_day(busy_blocks, day_start, day_start.add(days=1))

    slots = compute_availability(
        day_start,
        schedule,
        slot_duration_minutes,
        settings,
        day_blocks,
        now,
        gap_minutes,
    )

    return DayPreview(
        date=date_str,
        day_of_week=day_of_week,
        slots=slots,
        is_available=schedule.is_available and len(slots) > 0,
        time_ranges=group_slots_into_ranges(slots),
    )


def summarize_preview(days: Sequence[DayPreview]) -> AvailabilityPreview:
    """Attach slot and hour totals to a list of day previews."""
    total_slots = sum(len(day.slots) for day in days)
    total_minutes = sum(
        slot.duration_minutes()
        for day in days
        for slot in day.slots
    )

    return AvailabilityPreview(
        days=list(days),
        total_slots=total_slots,
        # Halves round up, 15 minutes reads as 0.3 hours
        total_hours=math.floor(total_minutes / 6 + 0.5) / 10,
    )
