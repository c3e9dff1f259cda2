"""
Overlay of existing bookings on resolved availability.
"""

import logging
from typing import List, Optional, Sequence

from .availability import DayBoundary
from .intervals import intersect, normalize, subtract
from .models import Booking, Interval, intervals_of

logger = logging.getLogger(__name__)


def apply_bookings(
    availability: Sequence[Interval],
    bookings: Sequence[Booking],
    range_: Interval,
    day_boundary: Optional[DayBoundary] = None,
) -> List[Interval]:
    """
    Apply existing bookings to an availability window.

    Free bookings are additive exceptions to the weekly pattern (e.g. a one-off
    opened slot) and are clipped to the range. Busy and busy-unavailable
    bookings remove time. Both sides are normalized before the subtraction.

    Args:
        availability: Resolved availability, normalized or not
        bookings: Existing bookings already filtered to relevant statuses
        range_: Interval to restrict added availability to
        day_boundary: Accepted for symmetry with the resolver; bookings are
            absolute instants and need no day arithmetic

    Returns:
        Normalized intervals of net availability
    """
    free_bookings = [booking for booking in bookings if not booking.status.blocks_availability]
    busy_bookings = [booking for booking in bookings if booking.status.blocks_availability]

    free_intervals = [
        clipped
        for clipped in (intersect(interval, range_) for interval in intervals_of(free_bookings))
        if clipped
    ]
    busy_intervals = normalize(intervals_of(busy_bookings))

    logger.debug(
        "Overlaying %d free and %d busy booking(s) on %d interval(s)",
        len(free_intervals),
        len(busy_intervals),
        len(availability),
    )

    all_availability = normalize([*availability, *free_intervals])
    return subtract(all_availability, busy_intervals)
