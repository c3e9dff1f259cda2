"""
Core business logic for calculating open appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from typing import List, Optional, Sequence

from .alignment import find_aligned_slots
from .availability import DayBoundary, resolve_availability
from .bookings import apply_bookings
from .models import Booking, Interval, SchedulingParameters

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates open slots from scheduling parameters and existing bookings.

    Algorithm:
    1. Expand the weekly rules into concrete intervals within the range
    2. Add free bookings and remove busy bookings
    3. Cut every remaining interval into aligned, buffer-inclusive slots
    4. Strip the buffers from each slot

    The calculator holds only immutable configuration, so one instance can be
    shared between concurrent callers.
    """

    def __init__(self, parameters: SchedulingParameters, day_boundary: DayBoundary):
        self.parameters = parameters
        self.day_boundary = day_boundary

    def find_candidate_slots(
        self,
        range_: Interval,
        bookings: Sequence[Booking],
    ) -> List[Interval]:
        """
        Find all aligned slots, each still including the before/after buffers.

        Args:
            range_: Interval to search within
            bookings: Existing bookings overlapping the range

        Returns:
            List of buffer-inclusive Interval objects in chronological order
        """
        # The aligner reads minute-of-hour from interval starts, and those may
        # come from the range or a booking; all must carry the schedule's zone
        zone = self.day_boundary(range_.start).timezone
        range_ = range_.in_timezone(zone)
        bookings = [booking.in_timezone(zone) for booking in bookings]

        availability = resolve_availability(
            self.parameters.availability,
            range_,
            self.day_boundary,
        )
        net_availability = apply_bookings(availability, bookings, range_, self.day_boundary)

        spec = self.parameters.alignment_spec()
        slots = [
            slot
            for interval in net_availability
            for slot in find_aligned_slots(interval, spec)
        ]

        logger.debug(
            "Found %d aligned slot(s) in %d net availability interval(s)",
            len(slots),
            len(net_availability),
        )
        return slots

    def find_open_slots(
        self,
        range_: Interval,
        bookings: Sequence[Booking],
        limit: Optional[int] = None,
    ) -> List[Interval]:
        """
        Find open slots ready to be offered, buffers removed.

        Args:
            range_: Interval to search within
            bookings: Existing bookings overlapping the range
            limit: Maximum number of slots to return (None for all)

        Returns:
            List of Interval objects of exactly the appointment duration
        """
        candidates = self.find_candidate_slots(range_, bookings)
        if limit is not None:
            candidates = candidates[:limit]

        return [self.parameters.strip_buffers(slot) for slot in candidates]
