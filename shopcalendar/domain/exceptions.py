"""
Domain-specific exception hierarchy for the shop calendar engine.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class InvalidScheduleError(ScheduleError, ValueError):
    """Raised when a time, slot duration or stored payload is malformed."""


class ClosedDayError(InvalidScheduleError):
    """Raised when a per-day setting is changed on a day without opening hours."""


class PersistenceError(ScheduleError):
    """Raised when schedule data cannot be loaded from or saved to storage."""
