from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .row_data import ProductDayRecord

"""DayResult model: the unit handed to the rendering side.

One DayResult per located day block, ordered by day_number.
"""

__all__ = [
    "DayResult",
]


@dataclass(frozen=True)
class DayResult:
    """All product records for one day plus the activity flag used by the day filter."""
    day_number: int
    date_label: str
    has_activity: bool
    products: list[ProductDayRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dayNumber": self.day_number,
            "dateLabel": self.date_label,
            "hasActivity": self.has_activity,
            "products": [p.to_dict() for p in self.products],
        }
