"""
Booking source backed by a local JSON file of Slot resources.
"""

import json
import logging
from pathlib import Path
from typing import List

from pendulum import DateTime

from ..domain.exceptions import BookingSourceError
from ..domain.models import Booking
from .slot_resources import parse_slots

logger = logging.getLogger(__name__)


class FileBookingSource:
    """
    Loads existing bookings from a JSON file.

    The file holds either a list of Slot resources or a FHIR searchset
    Bundle of them. It is read on every call so edits are picked up
    without restarting.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load_resources(self) -> List[dict]:
        if not self.path.exists():
            raise BookingSourceError(f"Bookings file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BookingSourceError(f"Could not read bookings file {self.path}: {exc}") from exc

        if isinstance(data, dict) and data.get("resourceType") == "Bundle":
            return [entry.get("resource", {}) for entry in data.get("entry", [])]

        if isinstance(data, list):
            return data

        raise BookingSourceError(
            f"Bookings file {self.path} must contain a list of Slot resources or a Bundle"
        )

    async def get_bookings(
        self,
        schedule_id: str,
        start_time: DateTime,
        end_time: DateTime,
        limit: int,
    ) -> List[Booking]:
        """
        Load bookings of one schedule that overlap the time window.

        Args:
            schedule_id: Schedule whose bookings to load
            start_time: Start of the time window
            end_time: End of the time window
            limit: Maximum number of bookings to return

        Returns:
            List of Booking objects, at most ``limit`` long
        """
        bookings = parse_slots(self._load_resources(), schedule_id, start_time, end_time)
        logger.debug("Loaded %d booking(s) for %s from %s", len(bookings), schedule_id, self.path)
        return bookings[:limit]
