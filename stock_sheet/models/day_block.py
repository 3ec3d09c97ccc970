from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Day block and column role models.

A day block is the fixed-width group of sheet columns describing one calendar
day's movement figures for every product. Column roles are derived from the
header text of each column inside a block and are never stored.
"""

__all__ = [
    "ColumnRole",
    "DayBlock",
]


class ColumnRole(Enum):
    """Semantic role of one column inside a day block."""
    BROUGHT_FORWARD = "brought_forward"
    RECEIVED = "received"
    SOLD = "sold"
    WASTE = "waste"
    IGNORED = "ignored"


@dataclass(frozen=True)
class DayBlock:
    """Location of one day inside the wide sheet.

    Blocks are contiguous and exactly ``block_width`` columns wide, so the
    block for day N starts at ``base_offset + (N - 1) * block_width``.
    """
    day_number: int  # 1-based
    start_column: int  # 0-based sheet column of the first cell in the block
    date_label: str  # "1 มี.ค." style label or "Day N" fallback
    width: int = 8

    @property
    def columns(self) -> range:
        return range(self.start_column, self.start_column + self.width)
