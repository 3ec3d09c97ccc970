from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

"""Row level models for the stock sheet.

ProductRow: identity fields of a validated product row.
RowOutcome: explicit result of the product-row validation predicate
            (ValidRow | SkippedRow) so skip reasons can be counted and logged.
DayValues:  raw per-block figures extracted from one row.
ProductDayRecord: reconciled figures for one product on one day.
"""

__all__ = [
    "DayValues",
    "ProductDayRecord",
    "ProductRow",
    "RowOutcome",
    "SkipReason",
    "SkippedRow",
    "ValidRow",
]

Number = Union[int, float]


class SkipReason(Enum):
    """Why a sheet row is not treated as a product row."""
    MISSING_CATEGORY = "MISSING_CATEGORY"
    MISSING_CODE = "MISSING_CODE"
    MISSING_NAME = "MISSING_NAME"
    DUPLICATE_CODE = "DUPLICATE_CODE"


@dataclass(frozen=True)
class ProductRow:
    """A sheet row that passed validation. ``code`` is the product key."""
    row_number: int  # 0-based index in the raw sheet (header row = 0)
    category: str
    code: str
    name: str
    cells: tuple[Any, ...]  # 元の行 (ブロック抽出用)


@dataclass(frozen=True)
class ValidRow:
    product: ProductRow


@dataclass(frozen=True)
class SkippedRow:
    row_number: int
    reason: SkipReason
    code: str = ""


RowOutcome = Union[ValidRow, SkippedRow]


@dataclass(frozen=True)
class DayValues:
    """Figures read from one row within one day block, before carry-forward."""
    brought_forward_sheet: Number = 0
    received: Number = 0
    sold: Number = 0
    waste: Number = 0

    @property
    def has_movement(self) -> bool:
        return any(v != 0 for v in (self.brought_forward_sheet, self.received, self.sold, self.waste))


@dataclass(frozen=True)
class ProductDayRecord:
    """Reconciled figures for one product on one day.

    ``remain`` is kept exactly as computed and may be negative when the sheet's
    own figures are inconsistent. Clamping is a display concern.
    """
    date: str
    code: str
    name: str
    category: str
    brought_forward: Number
    received: Number
    sold: Number
    waste: Number
    remain: Number

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the renderer's field names."""
        return {
            "date": self.date,
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "broughtForward": self.brought_forward,
            "received": self.received,
            "sold": self.sold,
            "waste": self.waste,
            "remain": self.remain,
        }
