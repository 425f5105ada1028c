"""
Timezone helpers: resolving zones, parsing wall-clock strings and anchoring
them to concrete calendar dates.

All slot arithmetic happens on absolute instants. These helpers are the only
place where wall-clock values are turned into instants (and back), so host
timezone never leaks into a computation.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Tuple, Union

import pendulum
from pendulum import DateTime
from pendulum.tz.timezone import Timezone

from .exceptions import InvalidArgument, InvalidTimezone

DateLike = Union[datetime, date]


def resolve_timezone(name: str) -> Timezone:
    """
    Resolve an IANA timezone name.

    Raises:
        InvalidTimezone: If the identifier is unknown
    """
    if not name:
        raise InvalidTimezone(name)

    # "UTC" is a zero-offset special case and never needs a tz database lookup
    if name == "UTC":
        return pendulum.UTC

    try:
        return pendulum.timezone(name)
    except (ValueError, KeyError) as exc:
        raise InvalidTimezone(name) from exc


def to_instant(value: datetime) -> DateTime:
    """Normalise a datetime to a UTC pendulum DateTime (naive values are read as UTC)."""
    return pendulum.instance(value).in_timezone(pendulum.UTC)


def parse_time_of_day(value: str) -> Tuple[int, int]:
    """
    Parse a zero-padded ``HH:MM`` wall-clock string.

    ``24:00`` is accepted and denotes midnight at the end of the day.

    Raises:
        InvalidArgument: If the value is not a valid time of day
    """
    parts = value.split(":") if isinstance(value, str) else []
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise InvalidArgument(f"Time of day must be in HH:MM format, got {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if hour == 24 and minute == 0:
        return hour, minute
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidArgument(f"Time of day out of range: {value!r}")

    return hour, minute


def local_date(value: DateLike, timezone: str) -> date:
    """
    Return the calendar date ``value`` denotes when read in ``timezone``.

    A plain ``date`` is already a calendar date and is returned as-is.
    """
    if isinstance(value, datetime):
        local = pendulum.instance(value).in_timezone(resolve_timezone(timezone))
        return date(local.year, local.month, local.day)
    return value


def zoned_instant(day: date, time_of_day: str, timezone: str) -> DateTime:
    """Interpret ``time_of_day`` as wall-clock time on ``day`` in ``timezone``."""
    tz = resolve_timezone(timezone)
    hour, minute = parse_time_of_day(time_of_day)

    if hour == 24:
        local = pendulum.datetime(day.year, day.month, day.day, tz=tz).add(days=1)
    else:
        local = pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=tz)

    return local.in_timezone(pendulum.UTC)


def start_of_local_day(instant: datetime, timezone: str) -> DateTime:
    """Start of the calendar day ``instant`` falls on in ``timezone``."""
    return pendulum.instance(instant).in_timezone(resolve_timezone(timezone)).start_of("day")


def format_time_of_day(instant: datetime, timezone: str) -> str:
    """Render the wall-clock time of ``instant`` in ``timezone`` as ``HH:MM``."""
    return pendulum.instance(instant).in_timezone(resolve_timezone(timezone)).format("HH:mm")
