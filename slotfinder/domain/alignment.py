"""
Fixed-duration slot generation on a minute-of-hour alignment grid.
"""

from typing import List

from pendulum import DateTime

from .models import AlignmentSpec, Interval


def advance_to_minute_mark(instant: DateTime) -> DateTime:
    """
    Return the instant itself if it falls on a whole minute, otherwise the
    start of the next minute.
    """
    minute_start = instant.start_of("minute")
    if minute_start == instant:
        return instant
    return minute_start.add(minutes=1)


def find_aligned_slots(interval: Interval, spec: AlignmentSpec) -> List[Interval]:
    """
    Find all aligned slots that fit completely within an interval.

    Slots start on minutes where ``(minute - offset) % alignment == 0`` and
    are spaced ``alignment`` minutes apart; they may overlap each other when
    the duration is longer than the alignment. The minute of hour is read in
    the timezone of the interval start.

    Example:
    Interval: 09:00-11:00, alignment 60, offset 0, duration 20
    Result: [09:00-09:20, 10:00-10:20]
    """
    first_start = advance_to_minute_mark(interval.start)

    # Python's % is a true modulo for a positive divisor, so negative offsets work
    remainder = (first_start.minute - spec.offset_minutes) % spec.alignment
    to_align = 0 if remainder == 0 else spec.alignment - remainder

    start = first_start.add(minutes=to_align)
    end = start.add(minutes=spec.duration_minutes)

    slots: List[Interval] = []
    while end <= interval.end:
        slots.append(Interval(start=start, end=end))
        start = start.add(minutes=spec.alignment)
        end = start.add(minutes=spec.duration_minutes)

    return slots
