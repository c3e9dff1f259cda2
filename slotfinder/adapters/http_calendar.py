"""
Booking source that fetches Slot resources from a FHIR server.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests
from pendulum import DateTime

from ..domain.exceptions import BookingSourceError
from ..domain.models import Booking
from .slot_resources import RELEVANT_STATUSES, parse_slots, schedule_reference

logger = logging.getLogger(__name__)


class HttpBookingSource:
    """
    Client for the FHIR ``Slot`` search endpoint.

    Only slots with a status that affects availability are requested; the
    server is asked for at most ``limit`` results.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 30):
        """
        Initialize the HTTP booking source.

        Args:
            base_url: FHIR base URL, e.g. https://example.com/fhir/R4
            token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/fhir+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def get_bookings(
        self,
        schedule_id: str,
        start_time: DateTime,
        end_time: DateTime,
        limit: int,
    ) -> List[Booking]:
        """
        Fetch bookings of one schedule overlapping the time window.

        The blocking request runs in a worker thread.

        Raises:
            BookingSourceError: If the request fails or the response is malformed
        """
        return await asyncio.to_thread(
            self._fetch_bookings, schedule_id, start_time, end_time, limit
        )

    def _fetch_bookings(
        self,
        schedule_id: str,
        start_time: DateTime,
        end_time: DateTime,
        limit: int,
    ) -> List[Booking]:
        url = f"{self.base_url}/Slot"
        start = start_time.to_iso8601_string()
        end = end_time.to_iso8601_string()

        params = {
            "schedule": schedule_reference(schedule_id),
            "status": ",".join(RELEVANT_STATUSES),
            "_count": limit,
            # Slot starts in the window, ends in the window, or contains it
            "_filter": (
                f'((start ge "{start}" and start le "{end}") '
                f'or (end ge "{start}" and end le "{end}") '
                f'or (start lt "{start}" and end gt "{end}"))'
            ),
        }

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as exc:
            raise BookingSourceError(f"Failed to fetch slots from {url}: {exc}") from exc
        except ValueError as exc:
            raise BookingSourceError(f"Invalid JSON in response from {url}: {exc}") from exc

        bookings = parse_slots(self._bundle_resources(data), schedule_id, start_time, end_time)
        logger.debug("Fetched %d booking(s) for %s from %s", len(bookings), schedule_id, url)
        return bookings

    @staticmethod
    def _bundle_resources(bundle: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Extract the Slot resources from a searchset Bundle.

        Response format:
        {
            "resourceType": "Bundle",
            "type": "searchset",
            "entry": [{"resource": {"resourceType": "Slot", ...}}]
        }
        """
        if not isinstance(bundle, dict) or bundle.get("resourceType") != "Bundle":
            raise BookingSourceError("Expected a FHIR Bundle in the slot search response")

        return [
            entry["resource"]
            for entry in bundle.get("entry", [])
            if entry.get("resource", {}).get("resourceType") == "Slot"
        ]
