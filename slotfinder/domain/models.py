"""
Domain models for availability resolution and slot alignment.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Iterable, List, Tuple

from pendulum import DateTime

from .exceptions import ConfigurationError, InvalidIntervalError

DAY_NAMES: Tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class Interval:
    """
    Represents an immutable half-open time interval [start, end).

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidIntervalError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "Interval") -> bool:
        """Check if the intervals share at least one instant (touching does not count)."""
        return self.start < other.end and other.start < self.end

    def touches_or_overlaps(self, other: "Interval") -> bool:
        """Check if the intervals overlap or are exactly adjacent."""
        return self.start <= other.end and other.start <= self.end

    def shift(self, before: int = 0, after: int = 0) -> "Interval":
        """
        Return a new interval with its edges moved inward by minutes.

        ``before`` moves the start later, ``after`` moves the end earlier.
        Negative values widen the interval instead.
        """
        return Interval(
            start=self.start.add(minutes=before),
            end=self.end.subtract(minutes=after),
        )

    def in_timezone(self, tz) -> "Interval":
        """Return the same instants expressed in another timezone."""
        return Interval(start=self.start.in_timezone(tz), end=self.end.in_timezone(tz))


@dataclass(frozen=True)
class WeeklyAvailabilityRule:
    """
    A weekly recurring availability pattern.

    Every time of day on every listed weekday opens a window of
    ``duration_minutes``. Windows may run past midnight.
    """
    days_of_week: Tuple[str, ...]
    times_of_day: Tuple[time, ...]
    duration_minutes: int

    def __post_init__(self):
        if not self.days_of_week:
            raise ConfigurationError("An availability rule needs at least one day of week")
        unknown = [day for day in self.days_of_week if day not in DAY_NAMES]
        if unknown:
            raise ConfigurationError(f"Unknown day(s) of week: {unknown}")
        if self.duration_minutes <= 0:
            raise ConfigurationError(
                f"Availability duration must be positive, got {self.duration_minutes}"
            )

    def matches(self, day_name: str) -> bool:
        """Check if the rule applies to the given weekday name."""
        return day_name in self.days_of_week


@dataclass(frozen=True)
class AlignmentSpec:
    """
    Slot grid settings for the aligner.

    ``duration_minutes`` already includes any buffers and ``offset_minutes``
    already accounts for the buffer before the appointment, so it may be negative.
    """
    duration_minutes: int
    alignment: int
    offset_minutes: int = 0

    def __post_init__(self):
        if not 1 <= self.alignment <= 60:
            raise ConfigurationError(
                f"Alignment must be between 1 and 60 minutes, got {self.alignment}"
            )
        if self.duration_minutes <= 0:
            raise ConfigurationError(
                f"Slot duration must be positive, got {self.duration_minutes}"
            )


@dataclass(frozen=True)
class SchedulingParameters:
    """
    The full scheduling contract evaluated in one resolution pass.
    """
    availability: Tuple[WeeklyAvailabilityRule, ...]
    duration: int
    buffer_before: int = 0
    buffer_after: int = 0
    alignment_interval: int = 60
    alignment_offset: int = 0
    service_types: Tuple[str, ...] = ()
    wildcard: bool = True

    def __post_init__(self):
        if self.duration <= 0:
            raise ConfigurationError(f"Appointment duration must be positive, got {self.duration}")
        if self.buffer_before < 0 or self.buffer_after < 0:
            raise ConfigurationError("Buffers must not be negative")
        if not 1 <= self.alignment_interval <= 60:
            raise ConfigurationError(
                f"alignment_interval must be between 1 and 60, got {self.alignment_interval}"
            )

    def alignment_spec(self) -> AlignmentSpec:
        """
        Derive the aligner settings.

        The search window includes both buffers, and the grid is shifted back by
        ``buffer_before`` so the appointment itself lands on the requested phase.
        Example: a slot at :30 with a 10 minute buffer before is searched at :20.
        """
        return AlignmentSpec(
            duration_minutes=self.duration + self.buffer_before + self.buffer_after,
            alignment=self.alignment_interval,
            offset_minutes=self.alignment_offset - self.buffer_before,
        )

    def strip_buffers(self, interval: Interval) -> Interval:
        """Remove the buffers from a buffer-inclusive aligned interval."""
        return interval.shift(before=self.buffer_before, after=self.buffer_after)


class BookingStatus(str, Enum):
    """Statuses of existing bookings that affect availability."""
    FREE = "free"
    BUSY = "busy"
    BUSY_UNAVAILABLE = "busy-unavailable"

    @property
    def blocks_availability(self) -> bool:
        return self is not BookingStatus.FREE


@dataclass(frozen=True)
class Booking:
    """
    An existing booking overlaid on top of the recurring availability.

    ``free`` bookings open extra time, the busy statuses remove time.
    """
    interval: Interval
    status: BookingStatus

    @classmethod
    def create(cls, start: DateTime, end: DateTime, status: "BookingStatus | str") -> "Booking":
        return cls(interval=Interval(start=start, end=end), status=BookingStatus(status))

    def in_timezone(self, tz) -> "Booking":
        return Booking(interval=self.interval.in_timezone(tz), status=self.status)


@dataclass(frozen=True)
class Schedule:
    """
    A bookable schedule: its timezone and the parameter sets defined for it.
    """
    id: str
    scheduling_parameters: Tuple[SchedulingParameters, ...] = field(default_factory=tuple)
    timezone: str = "UTC"

    def wildcard_parameters(self) -> "SchedulingParameters | None":
        """Return the first parameter set that applies to any service."""
        for parameters in self.scheduling_parameters:
            if parameters.wildcard:
                return parameters
        return None


@dataclass
class TimeSlot:
    """
    Represents a found open slot, buffers already removed.
    """
    interval: Interval
    schedule_id: str

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:mm - HH:mm (N min)
        """
        start = self.interval.start
        end = self.interval.end

        weekday = DAY_NAMES[start.isoweekday() - 1].capitalize()
        date_str = start.format("YYYY-MM-DD")
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')}"
        duration = self.interval.duration_minutes()

        return f"{weekday}, {date_str} | {time_str} ({duration} min)"


def intervals_of(bookings: Iterable[Booking]) -> List[Interval]:
    """Return the intervals of the given bookings, preserving order."""
    return [booking.interval for booking in bookings]
