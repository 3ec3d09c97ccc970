from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..excel.rows import extract_day_values, validate_row
from ..models.config_models import ActivityConfig, HeaderVocabulary, ReconcileConfig, SheetLayout
from ..models.day_block import ColumnRole, DayBlock
from ..models.day_result import DayResult
from ..models.row_data import (
    ProductDayRecord,
    ProductRow,
    SkippedRow,
    SkipReason,
)

logger = logging.getLogger(__name__)

"""Carry-forward reconciler.

Walks the day blocks in increasing day order and, for every product row,
derives today's figures from yesterday's remain:

    brought_forward(d) = remain(d - 1)          (0 if never seen)
    remain(d)          = brought_forward(d) + received(d) - sold(d) - waste(d)

Day 1 is seeded from the sheet's own brought-forward figure when it is
positive. The carry state (code -> latest remain) is an explicit mapping that
is created per run, passed in and returned; nothing is kept between runs.
"""

__all__ = [
    "CarryState",
    "ProductRows",
    "collect_product_rows",
    "reconcile_day",
    "reconcile_days",
]

CarryState = dict[str, Any]  # code -> latest remain


@dataclass(frozen=True)
class ProductRows:
    """Validated product rows of one sheet plus the rows that were skipped."""
    products: list[ProductRow]
    skipped: list[SkippedRow]


def collect_product_rows(
    data_rows: Iterable[tuple[int, Sequence[Any]]],
    layout: SheetLayout = SheetLayout(),
) -> ProductRows:
    """Validate every data row once for the whole run.

    Args:
        data_rows: (raw row index, cells) pairs, header row excluded
        layout: Sheet geometry (identity column positions)

    A repeated code keeps its first row; later rows are skipped so that each
    product key has exactly one carry chain.
    """
    products: list[ProductRow] = []
    skipped: list[SkippedRow] = []
    seen: set[str] = set()
    for row_number, cells in data_rows:
        outcome = validate_row(cells, row_number, layout)
        if isinstance(outcome, SkippedRow):
            skipped.append(outcome)
            continue
        product = outcome.product
        if product.code in seen:
            skipped.append(
                SkippedRow(row_number=row_number, reason=SkipReason.DUPLICATE_CODE, code=product.code)
            )
            continue
        seen.add(product.code)
        products.append(product)
    return ProductRows(products=products, skipped=skipped)


def reconcile_day(
    block: DayBlock,
    products: Sequence[ProductRow],
    header_row: Sequence[Any],
    carry: CarryState,
    vocabulary: HeaderVocabulary,
    positional_fallback: Sequence[ColumnRole] | None = None,
    activity: ActivityConfig = ActivityConfig(),
) -> DayResult:
    """Reconcile one day. Updates ``carry`` once per product."""
    records: list[ProductDayRecord] = []
    has_activity = False

    for product in products:
        values = extract_day_values(
            product.cells,
            block,
            header_row,
            vocabulary=vocabulary,
            positional_fallback=positional_fallback,
        )
        brought_forward = carry.get(product.code, 0)
        # 初日のみ: シート記載の繰越在庫を優先
        if block.day_number == 1 and product.code not in carry and values.brought_forward_sheet > 0:
            brought_forward = values.brought_forward_sheet
        remain = brought_forward + values.received - values.sold - values.waste
        carry[product.code] = remain

        if activity.include_carried_stock:
            figures = (brought_forward, values.received, values.sold, values.waste, remain)
            if any(v != 0 for v in figures):
                has_activity = True
        elif values.has_movement:
            has_activity = True

        records.append(
            ProductDayRecord(
                date=block.date_label,
                code=product.code,
                name=product.name,
                category=product.category,
                brought_forward=brought_forward,
                received=values.received,
                sold=values.sold,
                waste=values.waste,
                remain=remain,
            )
        )

    return DayResult(
        day_number=block.day_number,
        date_label=block.date_label,
        has_activity=has_activity,
        products=records,
    )


def reconcile_days(
    blocks: Sequence[DayBlock],
    products: Sequence[ProductRow],
    header_row: Sequence[Any],
    config: ReconcileConfig,
    carry: CarryState | None = None,
    on_day: Callable[[DayResult], None] | None = None,
) -> tuple[list[DayResult], CarryState]:
    """Reconcile all days sequentially.

    Args:
        blocks: Located day blocks (any order; processed by day_number)
        products: Validated product rows
        header_row: Sheet header row used for column classification
        config: Vocabulary / positional fallback / activity settings
        carry: Starting carry state, a fresh mapping when None
        on_day: Optional callback invoked with each finished DayResult

    Returns:
        (day results ordered by day_number, final carry state)
    """
    state: CarryState = {} if carry is None else carry
    results: list[DayResult] = []
    for block in sorted(blocks, key=lambda b: b.day_number):
        day = reconcile_day(
            block,
            products,
            header_row,
            state,
            config.vocabulary,
            positional_fallback=config.positional_fallback,
            activity=config.activity,
        )
        logger.debug(
            "day=%s label=%s products=%s active=%s",
            day.day_number, day.date_label, len(day.products), day.has_activity,
        )
        results.append(day)
        if on_day is not None:
            on_day(day)
    return results, state
