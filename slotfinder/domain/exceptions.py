"""
Domain-specific exception hierarchy for the slot finder application.
"""


class SlotFinderError(Exception):
    """Base class for all application-level errors."""


class InvalidIntervalError(SlotFinderError, ValueError):
    """Raised when an interval would be constructed with end <= start."""


class ConfigurationError(SlotFinderError, ValueError):
    """Raised when scheduling parameters or alignment settings are invalid."""


class SearchRangeError(SlotFinderError):
    """Raised when a requested search range is empty, reversed or too long."""


class TooManyBookingsError(SlotFinderError):
    """Raised when the booking source may have truncated its results."""


class NoSchedulingParametersError(SlotFinderError):
    """Raised when a schedule has no scheduling parameters to evaluate."""


class BookingSourceError(SlotFinderError):
    """Raised when booking data cannot be fetched or parsed."""
