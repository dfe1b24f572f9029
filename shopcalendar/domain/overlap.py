"""
Overlap check between a candidate date range and stored special dates.
"""

from typing import Iterable

from .models import DateRange, DateRangeRecord


def is_overlapping(candidate: DateRange, existing: Iterable[DateRangeRecord]) -> bool:
    """
    Check whether a candidate range shares a day with any stored record.

    Ranges are closed intervals, so a candidate starting on the day another
    record ends is an overlap. Stops at the first conflicting record.

    Args:
        candidate: Normalized range about to be committed
        existing: Records already in the store

    Returns:
        True if any record conflicts with the candidate
    """
    for record in existing:
        if candidate.start <= record.end_date and candidate.end >= record.start_date:
            return True
    return False
