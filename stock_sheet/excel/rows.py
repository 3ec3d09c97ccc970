from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.config_models import DEFAULT_VOCABULARY, HeaderVocabulary, SheetLayout
from ..models.day_block import ColumnRole, DayBlock
from ..models.row_data import (
    DayValues,
    ProductRow,
    RowOutcome,
    SkippedRow,
    SkipReason,
    ValidRow,
)
from .cells import to_number
from .headers import classify_header

"""Row extractor.

Two steps, both pure:
1. validate_row: product-row predicate. Section separators, totals and blank
   rows lack one of category / code / name and come back as SkippedRow.
2. extract_day_values: read the cells of one day block for a product row and
   aggregate them per role.

Aggregation per role:
- BROUGHT_FORWARD: last value seen wins
- RECEIVED: max(abs) (some sheets repeat the received figure in two columns)
- SOLD: sum(abs) (cash / transfer subtotals are additive)
- WASTE: sum(abs)
"""

__all__ = [
    "cell_at",
    "extract_day_values",
    "validate_row",
]


def cell_at(row: Sequence[Any], index: int) -> Any:
    """Return row[index], or "" when the row is shorter than index."""
    if 0 <= index < len(row):
        value = row[index]
        return "" if value is None else value
    return ""


def _text(row: Sequence[Any], index: int) -> str:
    return str(cell_at(row, index)).strip()


def validate_row(row: Sequence[Any], row_number: int, layout: SheetLayout = SheetLayout()) -> RowOutcome:
    category = _text(row, layout.category_column)
    code = _text(row, layout.code_column)
    name = _text(row, layout.name_column)
    if not category:
        return SkippedRow(row_number=row_number, reason=SkipReason.MISSING_CATEGORY, code=code)
    if not code:
        return SkippedRow(row_number=row_number, reason=SkipReason.MISSING_CODE)
    if not name:
        return SkippedRow(row_number=row_number, reason=SkipReason.MISSING_NAME, code=code)
    return ValidRow(
        ProductRow(
            row_number=row_number,
            category=category,
            code=code,
            name=name,
            cells=tuple(row),
        )
    )


def extract_day_values(
    row: Sequence[Any],
    block: DayBlock,
    header_row: Sequence[Any],
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    positional_fallback: Sequence[ColumnRole] | None = None,
) -> DayValues:
    brought_forward: int | float = 0
    received: int | float = 0
    sold: int | float = 0
    waste: int | float = 0

    for position, column in enumerate(block.columns):
        role = classify_header(
            cell_at(header_row, column),
            position,
            vocabulary=vocabulary,
            positional_fallback=positional_fallback,
        )
        if role is ColumnRole.IGNORED:
            continue
        value = to_number(cell_at(row, column))
        if role is ColumnRole.BROUGHT_FORWARD:
            brought_forward = value
        elif role is ColumnRole.RECEIVED:
            received = max(received, abs(value))
        elif role is ColumnRole.SOLD:
            sold += abs(value)
        elif role is ColumnRole.WASTE:
            waste += abs(value)

    return DayValues(
        brought_forward_sheet=brought_forward,
        received=received,
        sold=sold,
        waste=waste,
    )
