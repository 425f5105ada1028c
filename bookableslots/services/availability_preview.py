"""
Application services for building multi-day availability previews.

The service fetches busy intervals once for the whole range via an injected
provider and delegates the per-day computation to the domain layer. The
provider is the only I/O boundary; everything else is synchronous and pure.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

import pendulum

from ..domain.exceptions import InvalidArgument
from ..domain.models import AvailabilityPreview, AvailabilitySettings, BusyBlock, DayPreview, DaySchedule
from ..domain.preview import build_day_preview, summarize_preview
from ..domain.timezones import start_of_local_day, to_instant

logger = logging.getLogger(__name__)


FetchBusyBlocks = Callable[
    [datetime, datetime, Optional[Sequence[str]]],
    Awaitable[Sequence[BusyBlock]],
]


class BusyBlockProvider(Protocol):
    """Protocol describing the busy-interval source needed by the service."""

    async def get_busy_blocks(
        self,
        range_start: datetime,
        range_end: datetime,
        selected_calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[BusyBlock]:
        """Return busy blocks intersecting ``[range_start, range_end)``."""


async def build_preview(
    start_date: datetime,
    number_of_days: int,
    settings: AvailabilitySettings,
    weekly_template: Sequence[DaySchedule],
    slot_duration_minutes: int,
    gap_minutes: int,
    fetch_busy_blocks: FetchBusyBlocks,
    selected_calendar_ids: Optional[Sequence[str]] = None,
    *,
    now: Optional[datetime] = None,
) -> AvailabilityPreview:
    """
    Compute availability for ``number_of_days`` calendar days from ``start_date``.

    Busy blocks are fetched once for the whole range; errors raised by
    ``fetch_busy_blocks`` propagate unchanged.

    Args:
        start_date: First instant of the preview; its calendar day in
            ``settings.timezone`` is day 0
        number_of_days: How many calendar days to include
        settings: Availability policy
        weekly_template: Day-of-week keyed schedule entries
        slot_duration_minutes: Length of every slot
        gap_minutes: Gap between consecutive slots
        fetch_busy_blocks: Async callable returning busy blocks for a range
        selected_calendar_ids: Calendars to query, passed through to the provider
        now: The current instant; defaults to ``start_date``

    Returns:
        AvailabilityPreview with one DayPreview per day and totals

    Raises:
        InvalidArgument: If the inputs are degenerate
    """
    if number_of_days < 0:
        raise InvalidArgument(f"Number of days must not be negative, got {number_of_days}")
    if slot_duration_minutes <= 0:
        raise InvalidArgument(f"Slot duration must be positive, got {slot_duration_minutes}")
    if gap_minutes < 0:
        raise InvalidArgument(f"Gap between slots must not be negative, got {gap_minutes}")

    start = to_instant(start_date)
    current_time = to_instant(now) if now is not None else start

    first_day = start_of_local_day(start, settings.timezone)
    range_end = first_day.add(days=number_of_days)

    logger.debug(
        "Fetching busy blocks from %s to %s (calendars: %s)",
        start.to_iso8601_string(),
        range_end.to_iso8601_string(),
        selected_calendar_ids,
    )
    busy_blocks = list(await fetch_busy_blocks(start, range_end, selected_calendar_ids))
    logger.debug("Received %d busy blocks", len(busy_blocks))

    days = []
    for offset in range(number_of_days):
        day_preview = build_day_preview(
            first_day.add(days=offset),
            weekly_template,
            slot_duration_minutes,
            gap_minutes,
            settings,
            busy_blocks,
            current_time,
        )
        logger.debug("%s (%s): %d slots", day_preview.date, day_preview.day_of_week.value, len(day_preview.slots))
        days.append(day_preview)

    return summarize_preview(days)


class AvailabilityPreviewService:
    """
    Orchestrates busy-interval retrieval and preview computation.

    Dependency inversion toward a protocol makes it easy to plug in a real
    calendar adapter or the in-memory implementation in tests.
    """

    def __init__(
        self,
        busy_block_provider: BusyBlockProvider,
        settings: AvailabilitySettings,
        weekly_template: Sequence[DaySchedule],
    ) -> None:
        self._busy_block_provider = busy_block_provider
        self._settings = settings
        self._weekly_template = list(weekly_template)

    @property
    def settings(self) -> AvailabilitySettings:
        return self._settings

    async def preview(
        self,
        *,
        start_date: datetime,
        number_of_days: int,
        slot_duration_minutes: int,
        gap_minutes: int = 0,
        selected_calendar_ids: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> AvailabilityPreview:
        """Build a preview for the configured schedule and policy."""
        return await build_preview(
            start_date,
            number_of_days,
            self._settings,
            self._weekly_template,
            slot_duration_minutes,
            gap_minutes,
            self._busy_block_provider.get_busy_blocks,
            selected_calendar_ids,
            now=now,
        )

    async def day_slots(
        self,
        *,
        date: datetime,
        slot_duration_minutes: int,
        gap_minutes: int = 0,
        selected_calendar_ids: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> DayPreview:
        """Bookable slots of a single calendar day."""
        day_start = start_of_local_day(date, self._settings.timezone)
        result = await build_preview(
            day_start,
            1,
            self._settings,
            self._weekly_template,
            slot_duration_minutes,
            gap_minutes,
            self._busy_block_provider.get_busy_blocks,
            selected_calendar_ids,
            now=now if now is not None else pendulum.now(pendulum.UTC),
        )
        return result.days[0]
