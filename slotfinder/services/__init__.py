"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .slot_finder import BookingSourceProtocol, SlotFinderService

__all__ = ["BookingSourceProtocol", "SlotFinderService"]
