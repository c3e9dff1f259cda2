"""
Adapters layer - External booking sources.
"""

from .file_calendar import FileBookingSource
from .http_calendar import HttpBookingSource

__all__ = ["FileBookingSource", "HttpBookingSource"]
