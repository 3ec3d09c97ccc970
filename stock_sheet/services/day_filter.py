from __future__ import annotations

from collections.abc import Sequence

from ..models.day_result import DayResult

"""Day filter.

Sheets pre-allocate a block for every day of the month. Trailing days with no
activity are dropped, but the result never becomes empty: when no day has
activity the input is returned unchanged.
"""

__all__ = [
    "drop_trailing_inactive_days",
]


def drop_trailing_inactive_days(days: Sequence[DayResult]) -> list[DayResult]:
    last_active = -1
    for index, day in enumerate(days):
        if day.has_activity:
            last_active = index
    if last_active < 0:
        return list(days)
    return list(days[: last_active + 1])
