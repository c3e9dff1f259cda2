"""
Expansion of weekly recurring availability into concrete intervals.

The resolver performs only calendar-day iteration and time-of-day offsets.
Timezone handling lives entirely in the injected day boundary function.
"""

import logging
from typing import Callable, Iterator, List, Sequence

import pendulum
from pendulum import DateTime

from .intervals import intersect
from .models import DAY_NAMES, Interval, WeeklyAvailabilityRule

logger = logging.getLogger(__name__)

DayBoundary = Callable[[DateTime], DateTime]


def day_boundary_for(timezone: str) -> DayBoundary:
    """
    Build a day boundary function for an IANA timezone.

    The returned function maps any instant to the local midnight that starts
    its calendar day in ``timezone``.

    Raises:
        pendulum.tz.exceptions.InvalidTimezone: If the timezone is unknown
    """
    zone = pendulum.timezone(timezone)

    def start_of_local_day(instant: DateTime) -> DateTime:
        return instant.in_timezone(zone).start_of("day")

    return start_of_local_day


def iter_days(range_: Interval, day_boundary: DayBoundary) -> Iterator[DateTime]:
    """
    Yield the local midnight of every calendar day touching the range.

    Both range boundaries are inclusive: a range ending exactly at midnight
    still yields that day.
    """
    day = day_boundary(range_.start)

    while day <= range_.end:
        yield day
        # Noon of the following day, whatever the length of this one
        day = day_boundary(day.add(hours=36))


def resolve_availability(
    rules: Sequence[WeeklyAvailabilityRule],
    range_: Interval,
    day_boundary: DayBoundary,
) -> List[Interval]:
    """
    Returns the intervals of availability defined by weekly rules within a range.

    Intervals that run past midnight are kept whole (then clipped to the
    range only). The result is not normalized: rules may overlap each other.

    Args:
        rules: Weekly availability rules; their intervals are unioned downstream
        range_: Interval to resolve availability within
        day_boundary: Maps an instant to its timezone-correct local midnight

    Returns:
        List of Interval objects in day order, clipped to the range
    """
    intervals: List[Interval] = []

    for day in iter_days(range_, day_boundary):
        day_name = DAY_NAMES[day.isoweekday() - 1]

        for rule in rules:
            if not rule.matches(day_name):
                continue

            for time_of_day in rule.times_of_day:
                # Elapsed time since local midnight
                start = day.add(
                    hours=time_of_day.hour,
                    minutes=time_of_day.minute,
                    seconds=time_of_day.second,
                )
                end = start.add(minutes=rule.duration_minutes)

                clipped = intersect(Interval(start=start, end=end), range_)
                if clipped:
                    intervals.append(clipped)

    logger.debug("Resolved %d availability interval(s) from %d rule(s)", len(intervals), len(rules))
    return intervals
