"""
Counts of special date ranges for the summary panel.
"""

from dataclasses import dataclass, field
from typing import Dict

from .models import RangeType
from .special_dates import SpecialDateRangeStore


@dataclass(frozen=True)
class AnalyticsSummary:
    total: int
    by_type: Dict[RangeType, int] = field(default_factory=dict)

    def count(self, range_type: RangeType) -> int:
        return self.by_type.get(range_type, 0)


def summarize(store: SpecialDateRangeStore) -> AnalyticsSummary:
    """Count stored ranges in total and per tag."""
    by_type = {range_type: 0 for range_type in RangeType}
    for record in store.list():
        by_type[record.type] += 1

    return AnalyticsSummary(total=len(store), by_type=by_type)
