"""
In-memory busy-interval provider keyed by calendar id.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..domain.models import BusyBlock


class InMemoryBusyBlockProvider:
    """
    Busy-interval provider holding blocks in memory.

    Returns deterministic results for a given set of blocks, which makes it
    the natural collaborator for tests and for hosts that already resolved
    busy intervals themselves.
    """

    def __init__(self, blocks: Optional[Dict[str, List[BusyBlock]]] = None):
        self._blocks: Dict[str, List[BusyBlock]] = {
            calendar_id: list(calendar_blocks)
            for calendar_id, calendar_blocks in (blocks or {}).items()
        }

    def set_busy_blocks(self, calendar_id: str, blocks: Sequence[BusyBlock]) -> None:
        """Replace all busy blocks of a calendar."""
        self._blocks[calendar_id] = list(blocks)

    def add_busy_block(
        self,
        calendar_id: str,
        start: datetime,
        end: datetime,
        provider: Optional[str] = None,
    ) -> BusyBlock:
        """Add a single busy block to a calendar."""
        block = BusyBlock(start=start, end=end, calendar_id=calendar_id, provider=provider)
        self._blocks.setdefault(calendar_id, []).append(block)
        return block

    def clear_calendar(self, calendar_id: str) -> None:
        self._blocks.pop(calendar_id, None)

    def clear_all(self) -> None:
        self._blocks.clear()

    def all_busy_blocks(self) -> List[BusyBlock]:
        """All blocks across calendars, sorted by start."""
        return sorted(
            (block for blocks in self._blocks.values() for block in blocks),
            key=lambda b: b.start,
        )

    async def get_busy_blocks(
        self,
        range_start: datetime,
        range_end: datetime,
        selected_calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[BusyBlock]:
        """
        Return blocks of the selected calendars intersecting the range.

        Args:
            range_start: Start of the range (inclusive)
            range_end: End of the range (exclusive)
            selected_calendar_ids: Calendars to include; all when None

        Returns:
            Busy blocks sorted by start time
        """
        calendar_ids = (
            list(self._blocks.keys())
            if selected_calendar_ids is None
            else selected_calendar_ids
        )

        blocks: List[BusyBlock] = []
        for calendar_id in calendar_ids:
            blocks.extend(
                block for block in self._blocks.get(calendar_id, [])
                if block.overlaps(range_start, range_end)
            )

        return sorted(blocks, key=lambda b: b.start)
