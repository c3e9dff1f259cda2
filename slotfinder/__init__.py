"""
slotfinder - Open appointment slots from recurring weekly availability.
"""

__version__ = "0.1.0"
