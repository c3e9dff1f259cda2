"""
Application services for finding open appointment slots on a schedule.

The service validates the search request, fetches existing bookings via a
booking source adapter, picks the scheduling parameters to evaluate and
delegates the actual availability calculation to the domain-level
``SlotCalculator``. This keeps the CLI thin and improves testability by
allowing the booking source to be mocked via a simple protocol.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

from pendulum import DateTime

from ..domain.availability import day_boundary_for
from ..domain.exceptions import (
    NoSchedulingParametersError,
    SearchRangeError,
    TooManyBookingsError,
)
from ..domain.models import Booking, Interval, Schedule, TimeSlot
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)

DEFAULT_MAX_RANGE_DAYS = 31
DEFAULT_MAX_BOOKINGS = 1000
DEFAULT_PAGE_SIZE = 20


class BookingSourceProtocol(Protocol):
    """Protocol describing the booking source behaviour needed by the service."""

    async def get_bookings(
        self,
        schedule_id: str,
        start_time: DateTime,
        end_time: DateTime,
        limit: int,
    ) -> List[Booking]:
        """Return at most ``limit`` free/busy bookings overlapping the window."""


class SlotFinderService:
    """
    Orchestrates booking retrieval and slot calculation for one schedule.

    Dependency inversion toward a protocol makes it easy to plug in the
    HTTP adapter, the file adapter or a stub in tests.
    """

    def __init__(
        self,
        booking_source: BookingSourceProtocol,
        max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
        max_bookings: int = DEFAULT_MAX_BOOKINGS,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._booking_source = booking_source
        self._max_range_days = max_range_days
        self._max_bookings = max_bookings
        self._page_size = page_size

    async def find_slots(
        self,
        *,
        schedule: Schedule,
        start_date: DateTime,
        end_date: DateTime,
    ) -> List[TimeSlot]:
        """
        Validate the range, retrieve bookings and compute open slots.

        Raises:
            SearchRangeError: If the range is empty, reversed or too long
            TooManyBookingsError: If the booking source may have truncated its results
            NoSchedulingParametersError: If the schedule has no wildcard parameters
        """
        range_ = self.validate_range(start_date, end_date)

        parameters = schedule.wildcard_parameters()
        if parameters is None:
            raise NoSchedulingParametersError(
                f"No matching scheduling parameters found for schedule '{schedule.id}'"
            )

        bookings = await self.fetch_bookings(schedule_id=schedule.id, range_=range_)

        logger.info(
            "Searching schedule %s from %s to %s (%s) with %d booking(s)",
            schedule.id,
            range_.start.to_iso8601_string(),
            range_.end.to_iso8601_string(),
            schedule.timezone,
            len(bookings),
        )

        calculator = SlotCalculator(
            parameters=parameters,
            day_boundary=day_boundary_for(schedule.timezone),
        )
        intervals = calculator.find_open_slots(range_, bookings, limit=self._page_size)

        return [TimeSlot(interval=interval, schedule_id=schedule.id) for interval in intervals]

    async def fetch_bookings(self, *, schedule_id: str, range_: Interval) -> List[Booking]:
        """Fetch existing bookings, failing loudly if the result may be incomplete."""
        bookings = await self._booking_source.get_bookings(
            schedule_id=schedule_id,
            start_time=range_.start,
            end_time=range_.end,
            limit=self._max_bookings,
        )

        # A full page means bookings we did not see could still block time
        if len(bookings) >= self._max_bookings:
            raise TooManyBookingsError(
                "Too many bookings found in range; try searching with smaller bounds"
            )

        return list(bookings)

    def validate_range(self, start_date: DateTime, end_date: DateTime) -> Interval:
        """Check the search window and return it as an Interval."""
        if start_date >= end_date:
            raise SearchRangeError("Invalid search time range")

        if end_date.diff(start_date).in_days() > self._max_range_days:
            raise SearchRangeError(
                f"Search range cannot exceed {self._max_range_days} days"
            )

        return Interval(start=start_date, end=end_date)
