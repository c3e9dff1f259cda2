"""
Parsing of FHIR ``Slot`` resources into domain bookings.

Both booking sources exchange existing bookings as Slot resources:

{
    "resourceType": "Slot",
    "schedule": {"reference": "Schedule/dr-smith"},
    "status": "busy",
    "start": "2025-12-01T10:00:00-05:00",
    "end": "2025-12-01T10:30:00-05:00"
}
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import BookingSourceError
from ..domain.models import Booking, BookingStatus, Interval

logger = logging.getLogger(__name__)

RELEVANT_STATUSES = tuple(status.value for status in BookingStatus)


def schedule_reference(schedule_id: str) -> str:
    return f"Schedule/{schedule_id}"


def parse_datetime(value: str) -> DateTime:
    """
    Parse an ISO 8601 datetime string to a pendulum DateTime.

    Raises:
        ValueError: If the value is not a full datetime
    """
    parsed = pendulum.parse(value)

    if isinstance(parsed, DateTime):
        return parsed

    raise ValueError(f"Could not parse datetime: {value}")


def parse_slot(resource: Dict[str, Any]) -> Optional[Booking]:
    """
    Convert one Slot resource into a Booking.

    Returns None for statuses that do not affect availability.

    Raises:
        BookingSourceError: If the resource has missing or invalid times
    """
    status = str(resource.get("status", "")).lower()
    if status not in RELEVANT_STATUSES:
        logger.debug("Skipping slot %s with status '%s'", resource.get("id"), status)
        return None

    try:
        start = parse_datetime(resource["start"])
        end = parse_datetime(resource["end"])
        return Booking.create(start=start, end=end, status=status)
    except (KeyError, TypeError, ValueError) as exc:
        raise BookingSourceError(
            f"Invalid slot resource {resource.get('id', '<no id>')}: {exc}"
        ) from exc


def parse_slots(
    resources: Iterable[Dict[str, Any]],
    schedule_id: str,
    start_time: DateTime,
    end_time: DateTime,
) -> List[Booking]:
    """
    Convert Slot resources of one schedule that overlap the window into bookings.
    """
    reference = schedule_reference(schedule_id)
    window = Interval(start=start_time, end=end_time)
    bookings: List[Booking] = []

    for resource in resources:
        if resource.get("schedule", {}).get("reference") != reference:
            continue

        booking = parse_slot(resource)
        if booking is None:
            continue

        if booking.interval.overlaps(window):
            bookings.append(booking)

    return bookings
