from __future__ import annotations

import re
from collections.abc import Sequence

from ..models.config_models import SheetLayout
from ..models.day_block import DayBlock

"""Day-block locator.

The sheet pre-allocates one fixed-width block per calendar day after the
product identity columns. The number of blocks is derived from the column
count alone and clamped to [1, max_days].
"""

__all__ = [
    "count_day_blocks",
    "extract_date_label",
    "locate_day_blocks",
]

# "1 มี.ค.", "12 Feb 2026", "3\nยกมา" -> 先頭の "<数字> <トークン>"
_DATE_LABEL_RE = re.compile(r"^\s*(\d{1,2})\s+(\S+)")


def count_day_blocks(total_columns: int, layout: SheetLayout = SheetLayout()) -> int:
    count = (total_columns - layout.base_offset) // layout.block_width
    return max(1, min(layout.max_days, count))


def extract_date_label(header: object, day_number: int) -> str:
    text = "" if header is None else str(header)
    match = _DATE_LABEL_RE.match(text)
    if match is None:
        return f"Day {day_number}"
    return f"{match.group(1)} {match.group(2)}"


def locate_day_blocks(
    header_row: Sequence[object],
    total_columns: int | None = None,
    layout: SheetLayout = SheetLayout(),
) -> list[DayBlock]:
    """Return the ordered day blocks of a sheet.

    Args:
        header_row: Row holding day labels in the first cell of each block
        total_columns: Column count of the sheet (defaults to len(header_row))
        layout: Sheet geometry

    Returns:
        DayBlocks ordered by day_number, always at least one
    """
    if total_columns is None:
        total_columns = len(header_row)
    blocks: list[DayBlock] = []
    for day in range(1, count_day_blocks(total_columns, layout) + 1):
        start = layout.base_offset + (day - 1) * layout.block_width
        header = header_row[start] if start < len(header_row) else ""
        blocks.append(
            DayBlock(
                day_number=day,
                start_column=start,
                date_label=extract_date_label(header, day),
                width=layout.block_width,
            )
        )
    return blocks
