from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..excel.cells import to_number
from ..excel.rows import cell_at
from ..models.day_result import DayResult
from ..models.row_data import ProductDayRecord

"""Receipt-join variant.

Older exports ship two flat CSVs instead of the wide sheet:

inventory (file1): zone, receipt_no, code, name, bfwd, received, total, sold,
                   waste, others, remaining
receipts  (file2): hierarchical; a receipt header row carries
                   zone, receipt_no, "YYYY-MM-DD HH:MM", followed by item and
                   subtotal rows with blank receipt_no

Inventory rows are dated by looking up their receipt number in the receipts
file, then folded into one DayResult per date so the same renderer payload,
dashboard helpers and CLI table serve both input shapes. No carry-forward is
applied: every figure, remain included, comes from the sheet.
"""

__all__ = [
    "UNKNOWN_DATE",
    "InventoryRecord",
    "aggregate_by_product",
    "build_date_map",
    "build_receipt_days",
    "format_date_th",
    "parse_inventory",
    "unique_dates",
]

UNKNOWN_DATE = "Unknown"
INVENTORY_MIN_COLUMNS = 11

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_CATEGORY_RE = re.compile(r"\d+\.\s*(\S+)")


@dataclass(frozen=True)
class InventoryRecord:
    date: str
    receipt_no: str
    code: str
    category: str
    name: str
    brought_forward: int | float
    received: int | float
    sold: int | float
    waste: int | float
    remaining: int | float


def build_date_map(receipt_rows: Iterable[Sequence[Any]]) -> dict[str, str]:
    """receipt_no -> ISO date ("2026-02-23") from receipt header rows."""
    date_map: dict[str, str] = {}
    for row in receipt_rows:
        receipt_no = str(cell_at(row, 1)).strip()
        stamp = str(cell_at(row, 2)).strip()
        if receipt_no and _ISO_DATE_RE.match(stamp):
            date_map[receipt_no] = stamp[:10]
    return date_map


def _category_from_code(code: str) -> str:
    # "1. BEV005" -> "BEV005"
    match = _CATEGORY_RE.search(code)
    return match.group(1) if match else code


def parse_inventory(
    inventory_rows: Sequence[Sequence[Any]], date_map: dict[str, str]
) -> list[InventoryRecord]:
    records: list[InventoryRecord] = []
    for row in inventory_rows[1:]:  # 先頭行はヘッダ
        if len(row) < INVENTORY_MIN_COLUMNS:
            continue
        receipt_no = str(cell_at(row, 1)).strip()
        code = str(cell_at(row, 2)).strip()
        name = str(cell_at(row, 3)).strip()
        if not receipt_no or not name:
            continue
        records.append(
            InventoryRecord(
                date=date_map.get(receipt_no, UNKNOWN_DATE),
                receipt_no=receipt_no,
                code=code,
                category=_category_from_code(code),
                name=name,
                brought_forward=to_number(cell_at(row, 4)),
                received=to_number(cell_at(row, 5)),
                sold=to_number(cell_at(row, 7)),
                waste=to_number(cell_at(row, 8)),
                remaining=to_number(cell_at(row, 10)),
            )
        )
    return records


def unique_dates(records: Iterable[InventoryRecord]) -> list[str]:
    return sorted({r.date for r in records if r.date != UNKNOWN_DATE})


def format_date_th(iso_date: str | None) -> str:
    """Format an ISO date as DD/MM/YYYY ("2026-02-23" -> "23/02/2026")."""
    if not iso_date or iso_date == UNKNOWN_DATE:
        return "ไม่ทราบวันที่"
    parts = iso_date.split("-")
    if len(parts) != 3:
        return iso_date
    y, m, d = parts
    return f"{d}/{m}/{y}"


def aggregate_by_product(records: Iterable[InventoryRecord], date_label: str) -> list[ProductDayRecord]:
    """Sum one product's figures across its receipts (key: code + name), first-seen order."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for r in records:
        acc = merged.get((r.code, r.name))
        if acc is None:
            merged[(r.code, r.name)] = {
                "category": r.category,
                "brought_forward": r.brought_forward,
                "received": r.received,
                "sold": r.sold,
                "waste": r.waste,
                "remain": r.remaining,
            }
            continue
        acc["brought_forward"] += r.brought_forward
        acc["received"] += r.received
        acc["sold"] += r.sold
        acc["waste"] += r.waste
        acc["remain"] += r.remaining
    return [
        ProductDayRecord(date=date_label, code=code, name=name, **figures)
        for (code, name), figures in merged.items()
    ]


def build_receipt_days(records: Sequence[InventoryRecord]) -> list[DayResult]:
    """One DayResult per known date, ascending. Rows with an unknown date are left out."""
    days: list[DayResult] = []
    for number, iso_date in enumerate(unique_dates(records), start=1):
        label = format_date_th(iso_date)
        products = aggregate_by_product((r for r in records if r.date == iso_date), label)
        has_activity = any(
            v != 0
            for p in products
            for v in (p.brought_forward, p.received, p.sold, p.waste, p.remain)
        )
        days.append(DayResult(day_number=number, date_label=label, has_activity=has_activity, products=products))
    return days
