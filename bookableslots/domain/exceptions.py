"""
Domain-specific exception hierarchy for availability computation.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidTimezone(AvailabilityError, ValueError):
    """Raised when an IANA timezone identifier cannot be resolved."""

    def __init__(self, timezone: str):
        super().__init__(f"Unknown timezone: '{timezone}'")
        self.timezone = timezone


class InvalidArgument(AvailabilityError, ValueError):
    """Raised for degenerate inputs such as a non-positive slot duration."""


class CalendarDataError(AvailabilityError):
    """Raised when busy-interval data cannot be read or parsed."""
