"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.exceptions import AvailabilityError
from .domain.models import AvailabilitySettings, DayOfWeek, DaySchedule
from .domain.timezones import parse_time_of_day, resolve_timezone


class DayConfig(BaseModel):
    """One weekday of the weekly schedule."""
    day: DayOfWeek
    start_time: str = "09:00"
    end_time: str = "17:00"
    is_available: bool = True

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value):
        """Accept day names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        try:
            parse_time_of_day(value)
        except AvailabilityError as exc:
            raise ValueError(str(exc)) from exc
        return value

    def to_schedule(self) -> DaySchedule:
        return DaySchedule.from_day_availability(
            self.day,
            self.start_time,
            self.end_time,
            self.is_available,
        )


def _default_schedule() -> List[DayConfig]:
    return [
        DayConfig(day=day)
        for day in (
            DayOfWeek.MONDAY,
            DayOfWeek.TUESDAY,
            DayOfWeek.WEDNESDAY,
            DayOfWeek.THURSDAY,
            DayOfWeek.FRIDAY,
        )
    ]


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    buffer_time: int = Field(default=0, ge=0)
    minimum_notice: int = Field(default=0, ge=0)
    booking_window: int = Field(default=60, ge=0)
    slot_duration: int = Field(default=30, gt=0)
    time_gap: int = Field(default=0, ge=0)
    preview_days: int = Field(default=7, gt=0)
    calendars: List[str] | None = None  # None: every calendar the source knows
    schedule: List[DayConfig] = Field(default_factory=_default_schedule)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            resolve_timezone(value)
        except AvailabilityError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, value: List[DayConfig]) -> List[DayConfig]:
        """Ensure each weekday appears at most once."""
        seen: set[DayOfWeek] = set()
        for entry in value:
            if entry.day in seen:
                raise ValueError(f"Duplicate schedule entry for {entry.day.value}")
            seen.add(entry.day)
        return value

    def to_settings(self) -> AvailabilitySettings:
        """Build the policy snapshot used by the domain layer."""
        return AvailabilitySettings(
            timezone=self.timezone,
            buffer_time=self.buffer_time,
            minimum_notice=self.minimum_notice,
            booking_window=self.booking_window,
        )

    def weekly_template(self) -> List[DaySchedule]:
        """Resolve the configured schedule into day-keyed template entries."""
        return [entry.to_schedule() for entry in self.schedule]

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load booking policy and weekly schedule from a YAML file.

        An empty file yields the defaults (UTC, Monday to Friday 09:00-17:00).

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the YAML or any setting is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Availability config not found: {config_path}\n"
                f"Create one with a 'timezone' and a 'schedule' list of "
                f"day/start_time/end_time entries (see config.example.yaml)."
            )

        try:
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Could not parse availability config {config_path}: {exc}") from exc

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(
                f"Availability config {config_path} must be a mapping of settings, "
                f"got {type(raw).__name__}"
            )

        return cls(**raw)


def get_default_config_path() -> Path:
    """Return ./config.yaml, or the one beside the package when absent."""
    candidate = Path.cwd() / "config.yaml"
    if candidate.exists():
        return candidate

    return Path(__file__).resolve().parent.parent / "config.yaml"
