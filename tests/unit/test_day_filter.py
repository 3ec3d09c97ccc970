from __future__ import annotations

from stock_sheet.models.day_result import DayResult
from stock_sheet.services.day_filter import drop_trailing_inactive_days


def _days(*flags: bool) -> list[DayResult]:
    return [DayResult(day_number=i + 1, date_label=f"Day {i + 1}", has_activity=f) for i, f in enumerate(flags)]


def test_trailing_inactive_days_dropped():
    kept = drop_trailing_inactive_days(_days(True, False, False))
    assert [d.day_number for d in kept] == [1]


def test_all_inactive_returned_unchanged():
    days = _days(False, False)
    kept = drop_trailing_inactive_days(days)
    assert kept == days


def test_middle_inactive_days_kept():
    kept = drop_trailing_inactive_days(_days(True, False, True, False))
    assert [d.day_number for d in kept] == [1, 2, 3]


def test_single_empty_day_kept():
    kept = drop_trailing_inactive_days(_days(False))
    assert len(kept) == 1


def test_empty_input():
    assert drop_trailing_inactive_days([]) == []
