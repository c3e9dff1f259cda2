"""
Domain layer - Pure business logic without external dependencies.
"""

from .alignment import advance_to_minute_mark, find_aligned_slots
from .availability import day_boundary_for, resolve_availability
from .bookings import apply_bookings
from .intervals import intersect, merge, normalize, subtract
from .models import (
    AlignmentSpec,
    Booking,
    BookingStatus,
    Interval,
    Schedule,
    SchedulingParameters,
    TimeSlot,
    WeeklyAvailabilityRule,
)
from .slot_calculator import SlotCalculator

__all__ = [
    "AlignmentSpec",
    "Booking",
    "BookingStatus",
    "Interval",
    "Schedule",
    "SchedulingParameters",
    "SlotCalculator",
    "TimeSlot",
    "WeeklyAvailabilityRule",
    "advance_to_minute_mark",
    "apply_bookings",
    "day_boundary_for",
    "find_aligned_slots",
    "intersect",
    "merge",
    "normalize",
    "resolve_availability",
    "subtract",
]
