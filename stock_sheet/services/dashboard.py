from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..models.day_result import DayResult
from ..models.row_data import ProductDayRecord

"""Dashboard data helpers.

Pure functions computing what the dashboard shows from reconciled days:
active day selection, table search / sort, summary cards, top-N charts and
the daily trend. Clamping negative remain to zero happens here only; the
records themselves keep the reconciled value.
"""

__all__ = [
    "SORT_COLUMNS",
    "CardTotals",
    "TrendPoint",
    "negative_remain_records",
    "search_products",
    "select_active_day",
    "sort_products",
    "stock_badge",
    "summarize",
    "top_products",
    "trend_series",
]

# 表示列名 -> ProductDayRecord 属性
SORT_COLUMNS = {
    "code": "code",
    "name": "name",
    "category": "category",
    "broughtForward": "brought_forward",
    "received": "received",
    "sold": "sold",
    "waste": "waste",
    "remain": "remain",
}

LOW_STOCK_THRESHOLD = 10


@dataclass(frozen=True)
class CardTotals:
    received: int | float = 0
    sold: int | float = 0
    waste: int | float = 0
    remain: int | float = 0


@dataclass(frozen=True)
class TrendPoint:
    day_number: int
    date_label: str
    received: int | float
    sold: int | float
    waste: int | float
    remain: int | float


def select_active_day(days: Sequence[DayResult]) -> DayResult | None:
    """Most recent day with nonzero total sales, else the last day."""
    if not days:
        return None
    for day in reversed(days):
        if sum(p.sold for p in day.products) != 0:
            return day
    return days[-1]


def search_products(records: Iterable[ProductDayRecord], query: str | None) -> list[ProductDayRecord]:
    q = (query or "").strip().lower()
    if not q:
        return list(records)
    return [
        r for r in records
        if q in r.name.lower() or q in r.code.lower() or q in r.category.lower()
    ]


def _sort_key(attr: str):
    def key(record: ProductDayRecord) -> Any:
        value = getattr(record, attr)
        return value.lower() if isinstance(value, str) else value
    return key


def sort_products(
    records: Iterable[ProductDayRecord], column: str | None, descending: bool = False
) -> list[ProductDayRecord]:
    """Sort table rows by a display column (unknown column -> ValueError)."""
    rows = list(records)
    if not column:
        return rows
    attr = SORT_COLUMNS.get(column)
    if attr is None:
        raise ValueError(f"unknown sort column: {column} (expected one of {sorted(SORT_COLUMNS)})")
    return sorted(rows, key=_sort_key(attr), reverse=descending)


def summarize(records: Iterable[ProductDayRecord]) -> CardTotals:
    received = sold = waste = remain = 0
    for r in records:
        received += r.received
        sold += r.sold
        waste += r.waste
        remain += max(r.remain, 0)
    return CardTotals(received=received, sold=sold, waste=waste, remain=remain)


def top_products(
    records: Iterable[ProductDayRecord], field: str, n: int = 10
) -> list[tuple[str, int | float]]:
    """Per-name totals of ``field`` (positive only), largest first."""
    attr = SORT_COLUMNS.get(field, field)
    totals: dict[str, int | float] = {}
    for r in records:
        totals[r.name] = totals.get(r.name, 0) + getattr(r, attr)
    ranked = [(name, value) for name, value in totals.items() if value > 0]
    ranked.sort(key=lambda item: item[1], reverse=True)
    return ranked[:n]


def trend_series(days: Iterable[DayResult]) -> list[TrendPoint]:
    points: list[TrendPoint] = []
    for day in days:
        totals = summarize(day.products)
        points.append(
            TrendPoint(
                day_number=day.day_number,
                date_label=day.date_label,
                received=totals.received,
                sold=totals.sold,
                waste=totals.waste,
                remain=totals.remain,
            )
        )
    return points


def stock_badge(remain: int | float, sold: int | float) -> str:
    if remain <= 0 and sold > 0:
        return "danger"
    if remain < LOW_STOCK_THRESHOLD:
        return "warn"
    return "ok"


def negative_remain_records(days: Iterable[DayResult]) -> list[tuple[int, ProductDayRecord]]:
    """(day_number, record) pairs whose reconciled remain is below zero."""
    return [(day.day_number, r) for day in days for r in day.products if r.remain < 0]
