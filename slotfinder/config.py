"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    DAY_NAMES,
    Schedule,
    SchedulingParameters,
    WeeklyAvailabilityRule,
)
from .services.slot_finder import (
    DEFAULT_MAX_BOOKINGS,
    DEFAULT_MAX_RANGE_DAYS,
    DEFAULT_PAGE_SIZE,
)


class AvailabilityRuleConfig(BaseModel):
    """Weekly recurring availability, e.g. mon/wed at 09:30 for 180 minutes."""
    days_of_week: List[str]
    times_of_day: List[time]  # "HH:MM:SS"
    duration: int

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, value: List[str]) -> List[str]:
        """Ensure at least one known, lowercase day name."""
        days = [day.lower() for day in value]
        if not days:
            raise ValueError("days_of_week must contain at least one day")
        unknown = [day for day in days if day not in DAY_NAMES]
        if unknown:
            raise ValueError(f"days_of_week must be in {list(DAY_NAMES)}, got {unknown}")
        return days

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("duration must be greater than zero")
        return value

    def to_domain(self) -> WeeklyAvailabilityRule:
        return WeeklyAvailabilityRule(
            days_of_week=tuple(self.days_of_week),
            times_of_day=tuple(self.times_of_day),
            duration_minutes=self.duration,
        )


class SchedulingParametersConfig(BaseModel):
    """Scheduling contract for one schedule."""
    availability: List[AvailabilityRuleConfig] = Field(default_factory=list)
    duration: int = 30
    buffer_before: int = 0
    buffer_after: int = 0
    alignment_interval: int = 60
    alignment_offset: int = 0
    service_types: List[str] = Field(default_factory=list)
    wildcard: bool = True

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure appointment duration is positive."""
        if value <= 0:
            raise ValueError("duration must be greater than zero")
        return value

    @field_validator("buffer_before", "buffer_after")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Buffers must not be negative, got {value}")
        return value

    @field_validator("alignment_interval")
    @classmethod
    def validate_alignment(cls, value: int) -> int:
        """Validate alignment divides an hour's worth of minutes, 1 to 60."""
        if not 1 <= value <= 60:
            raise ValueError(f"alignment_interval must be between 1 and 60, got {value}")
        return value

    def to_domain(self) -> SchedulingParameters:
        return SchedulingParameters(
            availability=tuple(rule.to_domain() for rule in self.availability),
            duration=self.duration,
            buffer_before=self.buffer_before,
            buffer_after=self.buffer_after,
            alignment_interval=self.alignment_interval,
            alignment_offset=self.alignment_offset,
            service_types=tuple(self.service_types),
            wildcard=self.wildcard,
        )


class ScheduleConfig(BaseModel):
    """A bookable schedule."""
    id: str
    name: str = ""
    timezone: str = "UTC"
    scheduling_parameters: List[SchedulingParametersConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def display_name(self) -> str:
        return self.name or self.id

    def to_domain(self) -> Schedule:
        return Schedule(
            id=self.id,
            scheduling_parameters=tuple(p.to_domain() for p in self.scheduling_parameters),
            timezone=self.timezone,
        )


class SearchConfig(BaseModel):
    """Limits applied to every search."""
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS
    max_bookings: int = DEFAULT_MAX_BOOKINGS
    page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("max_range_days", "max_bookings", "page_size")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Search limits must be greater than zero, got {value}")
        return value


class BookingsConfig(BaseModel):
    """Where existing bookings come from: a local JSON file or a FHIR server."""
    file: Optional[Path] = None
    url: Optional[str] = None
    token: Optional[str] = None

    @model_validator(mode="after")
    def validate_single_source(self) -> "BookingsConfig":
        """Ensure exactly one booking source is configured."""
        if (self.file is None) == (self.url is None):
            raise ValueError("Configure exactly one of bookings.file or bookings.url")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    bookings: BookingsConfig
    search: SearchConfig = Field(default_factory=SearchConfig)
    schedules: List[ScheduleConfig] = Field(default_factory=list)

    @field_validator("schedules")
    @classmethod
    def validate_schedules(cls, value: List[ScheduleConfig]) -> List[ScheduleConfig]:
        """Ensure schedule ids are unique."""
        seen_ids: set[str] = set()
        for schedule in value:
            if schedule.id in seen_ids:
                raise ValueError(f"Duplicate schedule id detected: {schedule.id}")
            seen_ids.add(schedule.id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``bookings.file`` is resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        bookings_file = config.bookings.file
        if bookings_file is not None and not bookings_file.is_absolute():
            config.bookings.file = config_path.parent / bookings_file

        return config

    def find_schedule(self, schedule_id: str) -> ScheduleConfig:
        """
        Find a configured schedule by id.

        Raises:
            ValueError: If no schedule has that id
        """
        for schedule in self.schedules:
            if schedule.id == schedule_id:
                return schedule

        known = ", ".join(s.id for s in self.schedules) or "none"
        raise ValueError(f"Unknown schedule: '{schedule_id}'. Configured schedules: {known}")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
