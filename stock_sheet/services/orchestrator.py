from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..excel.blocks import locate_day_blocks
from ..excel.reader import RawSheet, SheetReadError, read_raw_sheet
from ..logging.issue_log import IssueLogBuffer, IssueRecord
from ..models.config_models import VARIANT_RECEIPT_JOIN, ReconcileConfig
from ..models.day_result import DayResult
from ..models.processing_result import ProcessingResult
from ..models.row_data import ProductDayRecord, SkippedRow
from ..models.snapshot import Snapshot, SnapshotStatus
from .carry_forward import CarryState, collect_product_rows, reconcile_days
from .dashboard import negative_remain_records
from .day_filter import drop_trailing_inactive_days
from .progress import DayProgress
from .receipt_join import UNKNOWN_DATE, build_date_map, build_receipt_days, parse_inventory

logger = logging.getLogger(__name__)

"""Run orchestration for the stock sheet reconciler.

Coordinates one run: read the raw sheet, locate day blocks, validate product
rows, reconcile days sequentially, drop trailing inactive days, record issues
and return the result set. Everything is rebuilt from scratch per run.

With variant receipt_join the source is a flat inventory sheet dated through a
second receipts sheet (run_receipt_join); it yields the same PipelineOutput.

SnapshotLoader wraps runs for callers that reload repeatedly (dashboard
refresh). It allows at most one reconciliation pass at a time and keeps the
previous successful snapshot when a fetch fails.
"""

__all__ = [
    "PipelineOutput",
    "ProcessingError",
    "SnapshotLoader",
    "process_source",
    "run_pipeline",
    "run_receipt_join",
    "write_days_json",
]

SheetReader = Callable[..., RawSheet]


class ProcessingError(Exception):
    """Fatal error for a run (sheet could not be fetched / output not written)."""


@dataclass(frozen=True)
class PipelineOutput:
    days: list[DayResult]  # day filter 適用後
    all_days: list[DayResult]  # 全デイブロック
    carry: CarryState  # 最終 remain (code -> remain)
    skipped: list[SkippedRow]
    result: ProcessingResult


def _total_columns(sheet: Sequence[Sequence[Any]]) -> int:
    return max((len(row) for row in sheet), default=0)


def _report_negative_remain(
    days: Sequence[DayResult], label: str, issue_log: IssueLogBuffer | None
) -> list[tuple[int, ProductDayRecord]]:
    negatives = negative_remain_records(days)
    for day_number, record in negatives:
        logger.warning(
            "negative remain day=%s code=%s name=%s remain=%s",
            day_number, record.code, record.name, record.remain,
        )
        if issue_log is not None:
            issue_log.append(
                IssueRecord.create(
                    source=label,
                    day=day_number,
                    row=-1,
                    issue_type="NEGATIVE_REMAIN",
                    message=f"code={record.code} remain={record.remain}",
                )
            )
    return negatives


def run_pipeline(
    sheet: RawSheet,
    config: ReconcileConfig,
    issue_log: IssueLogBuffer | None = None,
    source: str | None = None,
) -> PipelineOutput:
    """Reconcile an already-fetched sheet.

    Args:
        sheet: Raw text grid, header row at ``config.layout.header_row``
        config: Run configuration
        issue_log: Buffer receiving skipped-row / anomaly records (optional)
        source: Label for issue records (defaults to config.source)

    Returns:
        PipelineOutput with filtered and unfiltered days
    """
    start_time = datetime.now(UTC)
    layout = config.layout
    label = source if source is not None else config.source

    header_index = layout.header_row
    header_row = sheet[header_index] if header_index < len(sheet) else []
    blocks = locate_day_blocks(header_row, _total_columns(sheet), layout)

    data_rows = [(i, row) for i, row in enumerate(sheet) if i > header_index]
    collected = collect_product_rows(data_rows, layout)
    logger.info(
        "sheet=%s day_blocks=%s products=%s skipped_rows=%s",
        label, len(blocks), len(collected.products), len(collected.skipped),
    )

    for skipped in collected.skipped:
        logger.debug("row=%s skipped reason=%s code=%s", skipped.row_number, skipped.reason.value, skipped.code)
        if issue_log is not None:
            issue_log.append(
                IssueRecord.create(
                    source=label,
                    day=-1,
                    row=skipped.row_number,
                    issue_type=skipped.reason.value,
                    message=f"row skipped (code={skipped.code!r})",
                )
            )

    # 日順の逐次処理 (carry state は本 run 専用)
    with DayProgress(len(blocks)) as progress:
        all_days, carry = reconcile_days(
            blocks, collected.products, header_row, config, carry={}, on_day=progress
        )

    days = drop_trailing_inactive_days(all_days)
    if len(days) < len(all_days):
        logger.info("dropped %s trailing day(s) without activity", len(all_days) - len(days))

    negatives = _report_negative_remain(days, label, issue_log)

    end_time = datetime.now(UTC)
    result = ProcessingResult(
        total_days=len(all_days),
        kept_days=len(days),
        products=len(collected.products),
        skipped_rows=len(collected.skipped),
        negative_remain=len(negatives),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
    return PipelineOutput(
        days=days,
        all_days=all_days,
        carry=carry,
        skipped=collected.skipped,
        result=result,
    )


def run_receipt_join(
    inventory: RawSheet,
    receipts: RawSheet,
    config: ReconcileConfig,
    issue_log: IssueLogBuffer | None = None,
) -> PipelineOutput:
    """Build day results from an inventory sheet dated through a receipts sheet.

    Inventory rows whose receipt number has no dated header row in the receipts
    sheet are left out of every day and recorded as UNKNOWN_RECEIPT issues.
    """
    start_time = datetime.now(UTC)
    label = config.source

    records = parse_inventory(inventory, build_date_map(receipts))
    data_rows = max(len(inventory) - 1, 0)
    unknown = [r for r in records if r.date == UNKNOWN_DATE]
    logger.info(
        "inventory=%s receipts=%s records=%s unknown_date=%s",
        label, config.receipts, len(records), len(unknown),
    )
    for r in unknown:
        logger.debug("receipt=%s code=%s has no dated receipt row", r.receipt_no, r.code)
        if issue_log is not None:
            issue_log.append(
                IssueRecord.create(
                    source=label,
                    day=-1,
                    row=-1,
                    issue_type="UNKNOWN_RECEIPT",
                    message=f"receipt={r.receipt_no} code={r.code}",
                )
            )

    all_days = build_receipt_days(records)
    days = drop_trailing_inactive_days(all_days)
    negatives = _report_negative_remain(days, label, issue_log)

    end_time = datetime.now(UTC)
    result = ProcessingResult(
        total_days=len(all_days),
        kept_days=len(days),
        products=len({(r.code, r.name) for r in records}),
        skipped_rows=data_rows - len(records),
        negative_remain=len(negatives),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
    return PipelineOutput(days=days, all_days=all_days, carry={}, skipped=[], result=result)


def write_days_json(days: Sequence[DayResult], path: Path) -> Path:
    """Write the renderer payload (list of DayResult dicts) as UTF-8 JSON."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps([d.to_dict() for d in days], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        raise ProcessingError(f"failed to write output {path}: {e}") from e
    return path


def process_source(
    config: ReconcileConfig,
    reader: SheetReader = read_raw_sheet,
    issue_log: IssueLogBuffer | None = None,
) -> PipelineOutput:
    """Fetch the configured sheet(s) and run the pipeline for the config variant.

    Raises:
        ProcessingError: the sheet could not be read or the output not written
    """
    buffer = issue_log if issue_log is not None else IssueLogBuffer()
    receipts: RawSheet | None = None
    try:
        sheet = reader(config.source, sheet_name=config.sheet_name)
        if config.variant == VARIANT_RECEIPT_JOIN:
            receipts = reader(config.receipts, sheet_name=None)
    except SheetReadError as e:
        buffer.append(IssueRecord.create(config.source, -1, -1, "FETCH_ERROR", str(e)))
        _flush_quietly(buffer)
        raise ProcessingError(str(e)) from e

    if receipts is not None:
        output = run_receipt_join(sheet, receipts, config, issue_log=buffer)
    else:
        output = run_pipeline(sheet, config, issue_log=buffer)
    path = _flush_quietly(buffer)
    if path is not None:
        logger.info("issue log: %s", path)

    if config.output:
        written = write_days_json(output.days, Path(config.output))
        logger.info("wrote %s day(s) to %s", len(output.days), written)
    return output


def _flush_quietly(buffer: IssueLogBuffer) -> Path | None:
    # Issue log の書き込み失敗で run 全体は失敗させない
    try:
        return buffer.flush()
    except OSError as e:
        logger.warning("failed to write issue log: %s", e)
        return None


class SnapshotLoader:
    """Holds the latest successful snapshot and serializes reloads.

    A reload requested while another pass is running is ignored (BUSY), so two
    carry states can never interleave. A failed fetch keeps the previous
    snapshot visible.
    """

    def __init__(self, config: ReconcileConfig, reader: SheetReader = read_raw_sheet) -> None:
        self._config = config
        self._reader = reader
        self._lock = threading.Lock()
        self._snapshot: Snapshot | None = None
        self.last_error: str | None = None

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def reload(self) -> SnapshotStatus:
        if not self._lock.acquire(blocking=False):
            logger.info("reload ignored: reconciliation already in progress")
            return SnapshotStatus.BUSY
        try:
            try:
                output = process_source(self._config, reader=self._reader)
            except ProcessingError as e:
                self.last_error = str(e)
                logger.error("reload failed: %s", e)
                return SnapshotStatus.FAILED
            self._snapshot = Snapshot(
                source=self._config.source,
                loaded_at=datetime.now(UTC),
                output=output,
            )
            self.last_error = None
            return SnapshotStatus.LOADED
        finally:
            self._lock.release()
