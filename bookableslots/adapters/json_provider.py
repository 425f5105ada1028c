"""
Busy-interval provider reading a JSON export of calendar events.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import CalendarDataError, InvalidArgument
from ..domain.models import BusyBlock

logger = logging.getLogger(__name__)


class JsonBusyBlockProvider:
    """
    Provider that loads busy intervals from a JSON file.

    Expected format:
    [
        {
            "calendarId": "work",
            "start": "2025-01-28T15:00:00Z",
            "end": "2025-01-28T17:00:00Z",
            "provider": "google"
        }
    ]

    Times without an offset are read as UTC. Malformed entries are skipped.
    """

    def __init__(self, data_file: Path):
        self.data_file = Path(data_file)
        self.blocks = self._load_blocks()

    def _load_blocks(self) -> List[BusyBlock]:
        """
        Load and parse the JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            CalendarDataError: If the file is not a JSON list
        """
        if not self.data_file.exists():
            raise FileNotFoundError(f"Busy data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                events = json.load(f)
        except json.JSONDecodeError as exc:
            raise CalendarDataError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(events, list):
            raise CalendarDataError("Busy data file must contain a list of events.")

        blocks: List[BusyBlock] = []
        for index, event in enumerate(events):
            try:
                blocks.append(self._parse_event(event))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping busy entry #%d in %s: %s", index, self.data_file, exc)

        return blocks

    def _parse_event(self, event: Dict[str, Any]) -> BusyBlock:
        return BusyBlock(
            start=self._parse_datetime(event["start"]),
            end=self._parse_datetime(event["end"]),
            calendar_id=event.get("calendarId"),
            provider=event.get("provider"),
        )

    @staticmethod
    def _parse_datetime(value: str) -> DateTime:
        dt = pendulum.parse(value, tz="UTC")

        if isinstance(dt, DateTime):
            return dt.in_timezone("UTC")

        raise InvalidArgument(f"Could not parse datetime: {value}")

    async def get_busy_blocks(
        self,
        range_start: datetime,
        range_end: datetime,
        selected_calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[BusyBlock]:
        """Return loaded blocks of the selected calendars intersecting the range, sorted by start."""
        selected = set(selected_calendar_ids) if selected_calendar_ids is not None else None

        matching = [
            block for block in self.blocks
            if (selected is None or block.calendar_id in selected)
            and block.overlaps(range_start, range_end)
        ]

        return sorted(matching, key=lambda b: b.start)
