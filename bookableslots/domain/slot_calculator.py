"""
Core business logic for computing bookable slots for one calendar day.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).

Pipeline (order is fixed):
1. Generate evenly spaced candidate slots from the day's schedule
2. Drop slots overlapping a buffered busy block
3. Drop slots starting before the minimum-notice cutoff
4. Drop slots whose calendar day lies beyond the booking window
5. Relabel slot times in the display timezone
"""

from dataclasses import replace
from datetime import datetime
from typing import List, Sequence

import pendulum

from .exceptions import InvalidArgument
from .models import AvailabilitySettings, BusyBlock, DaySchedule, TimeSlot
from .timezones import (
    DateLike,
    format_time_of_day,
    local_date,
    resolve_timezone,
    start_of_local_day,
    to_instant,
    zoned_instant,
)


def generate_slots(
    date: DateLike,
    schedule: DaySchedule,
    slot_duration_minutes: int,
    gap_minutes: int,
    timezone: str,
) -> List[TimeSlot]:
    """
    Generate the raw candidate slots for one calendar day.

    The day's start and end times are anchored to ``date`` as it reads in
    ``timezone``, not in the host zone. Slots are stepped every
    ``slot_duration_minutes + gap_minutes``; a slot that would run past the
    day's end is never emitted.

    Raises:
        InvalidArgument: If the duration is not positive or the gap is negative
        InvalidTimezone: If the timezone is unknown
    """
    if slot_duration_minutes <= 0:
        raise InvalidArgument(f"Slot duration must be positive, got {slot_duration_minutes}")
    if gap_minutes < 0:
        raise InvalidArgument(f"Gap between slots must not be negative, got {gap_minutes}")

    resolve_timezone(timezone)

    if not schedule.is_available:
        return []

    day = local_date(date, timezone)
    day_start = zoned_instant(day, schedule.start_time, timezone)
    day_end = zoned_instant(day, schedule.end_time, timezone)

    slots: List[TimeSlot] = []
    current = day_start

    while current < day_end:
        slot_end = current.add(minutes=slot_duration_minutes)

        # No partial slots at the end of the day
        if slot_end > day_end:
            break

        slots.append(
            TimeSlot(
                start=current,
                end=slot_end,
                time_string=format_time_of_day(current, timezone),
            )
        )
        current = current.add(minutes=slot_duration_minutes + gap_minutes)

    return slots


def _blocks_slot(slot: TimeSlot, block: BusyBlock, buffer_minutes: int) -> bool:
    if buffer_minutes == 0:
        # Touching exactly at either edge is allowed without a buffer
        if slot.end == block.start or slot.start == block.end:
            return False
        return slot.start < block.end and slot.end > block.start

    buffered_start = block.start.subtract(minutes=buffer_minutes)
    buffered_end = block.end.add(minutes=buffer_minutes)

    # Asymmetric edges: a slot starting exactly at buffered_end is blocked,
    # a slot ending exactly at buffered_start is not.
    return slot.start <= buffered_end and slot.end > buffered_start


def exclude_busy(
    slots: Sequence[TimeSlot],
    busy_blocks: Sequence[BusyBlock],
    buffer_minutes: int,
) -> List[TimeSlot]:
    """
    Remove slots overlapping any busy block widened by ``buffer_minutes``.

    Input order is preserved.
    """
    if buffer_minutes < 0:
        raise InvalidArgument(f"Buffer time must not be negative, got {buffer_minutes}")

    if not busy_blocks:
        return list(slots)

    return [
        slot for slot in slots
        if not any(_blocks_slot(slot, block, buffer_minutes) for block in busy_blocks)
    ]


def exclude_too_soon(
    slots: Sequence[TimeSlot],
    now: datetime,
    minimum_notice_minutes: int,
    timezone: str,
) -> List[TimeSlot]:
    """
    Remove slots starting earlier than ``now + minimum_notice_minutes``.

    A slot starting exactly at the cutoff is kept.
    """
    if minimum_notice_minutes < 0:
        raise InvalidArgument(f"Minimum notice must not be negative, got {minimum_notice_minutes}")

    if minimum_notice_minutes == 0:
        return list(slots)

    tz = resolve_timezone(timezone)

    # Round-trip "now" through its wall-clock components in the zone; fold
    # keeps a repeated fall-back hour on the same instant
    local_now = pendulum.instance(now).in_timezone(tz)
    anchored_now = pendulum.datetime(
        local_now.year,
        local_now.month,
        local_now.day,
        local_now.hour,
        local_now.minute,
        local_now.second,
        local_now.microsecond,
        tz=tz,
        fold=local_now.fold,
    )
    cutoff = anchored_now.add(minutes=minimum_notice_minutes)

    return [slot for slot in slots if slot.start >= cutoff]


def exclude_beyond_window(
    slots: Sequence[TimeSlot],
    now: datetime,
    booking_window_days: int,
    timezone: str,
) -> List[TimeSlot]:
    """
    Remove slots whose calendar day lies beyond the booking window.

    Calendar days are resolved in ``timezone``. A window of N days keeps
    today through N days ahead (inclusive). A window of 0 keeps only slots
    starting today.
    """
    if booking_window_days < 0:
        raise InvalidArgument(f"Booking window must not be negative, got {booking_window_days}")

    today_start = start_of_local_day(now, timezone)

    if booking_window_days == 0:
        tomorrow_start = today_start.add(days=1)
        return [slot for slot in slots if today_start <= slot.start < tomorrow_start]

    cutoff_day_start = today_start.add(days=booking_window_days + 1)

    return [
        slot for slot in slots
        if start_of_local_day(slot.start, timezone) < cutoff_day_start
    ]


def relabel(slots: Sequence[TimeSlot], target_timezone: str) -> List[TimeSlot]:
    """Recompute each slot's ``time_string`` in ``target_timezone``; instants are untouched."""
    resolve_timezone(target_timezone)
    return [
        replace(slot, time_string=format_time_of_day(slot.start, target_timezone))
        for slot in slots
    ]


def compute_availability(
    date: DateLike,
    schedule: DaySchedule,
    slot_duration_minutes: int,
    settings: AvailabilitySettings,
    busy_blocks: Sequence[BusyBlock],
    now: datetime,
    gap_minutes: int = 0,
) -> List[TimeSlot]:
    """
    Compute the bookable slots for one calendar day.

    Args:
        date: The calendar day (an instant is read in ``settings.timezone``)
        schedule: The weekday template entry for that day
        slot_duration_minutes: Length of every slot
        settings: Buffer, notice, window and display timezone policy
        busy_blocks: Occupied intervals relevant to the day
        now: The current instant
        gap_minutes: Gap inserted between consecutive slots

    Returns:
        Ordered list of bookable TimeSlot objects labelled in the display timezone
    """
    now = to_instant(now)

    slots = generate_slots(
        date,
        schedule,
        slot_duration_minutes,
        gap_minutes,
        settings.timezone,
    )
    slots = exclude_busy(slots, busy_blocks, settings.buffer_time)
    slots = exclude_too_soon(slots, now, settings.minimum_notice, settings.timezone)
    slots = exclude_beyond_window(slots, now, settings.booking_window, settings.timezone)
    return relabel(slots, settings.timezone)
