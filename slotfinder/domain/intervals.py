"""
Interval algebra over half-open time intervals.

All functions are pure and return new intervals; inputs are never mutated.
"""

from typing import Iterable, List, Sequence

from .models import Interval


def intersect(left: Interval, right: Interval) -> Interval | None:
    """
    Return the region covered by both intervals.

    Exactly touching intervals share no instant, so they yield None.
    """
    if not left.overlaps(right):
        return None

    return Interval(start=max(left.start, right.start), end=min(left.end, right.end))


def merge(left: Interval, right: Interval) -> Interval | None:
    """
    Return the region covered by either interval.

    Unlike ``intersect``, touching intervals are fused so that adjacent
    availability does not leave a zero-length gap. Returns None if the
    intervals are separated.
    """
    if not left.touches_or_overlaps(right):
        return None

    return Interval(start=min(left.start, right.start), end=max(left.end, right.end))


def normalize(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Sort intervals by start and fuse every overlapping or touching pair.

    Example: [10:00-11:00, 09:00-10:00, 12:00-13:00] -> [09:00-11:00, 12:00-13:00]
    """
    normalized: List[Interval] = []

    for interval in sorted(intervals, key=lambda i: i.start):
        if normalized:
            merged = merge(normalized[-1], interval)
            if merged:
                normalized[-1] = merged
                continue
        normalized.append(interval)

    return normalized


def subtract(available: Sequence[Interval], blocked: Sequence[Interval]) -> List[Interval]:
    """
    Remove blocked time from available time in a single forward sweep.

    Both lists must already be normalized (sorted and non-overlapping); they
    are not sorted here, and unsorted blocks give wrong results.

    Example:
    Available: [09:00-17:00]
    Blocked: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    if not blocked:
        return list(available)

    result: List[Interval] = []
    blocked_index = 0

    for interval in available:
        current_start = interval.start

        # Skip blocks that end before this interval starts
        while blocked_index < len(blocked) and blocked[blocked_index].end <= current_start:
            blocked_index += 1

        while blocked_index < len(blocked) and blocked[blocked_index].start < interval.end:
            block = blocked[blocked_index]

            if current_start < block.start:
                result.append(Interval(start=current_start, end=block.start))

            current_start = max(current_start, block.end)

            # The block may also cover the next available interval
            if block.end >= interval.end:
                break

            blocked_index += 1

        if current_start < interval.end:
            result.append(Interval(start=current_start, end=interval.end))

    return result
