from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.blocks import locate_day_blocks
from ..excel.headers import classify_header
from ..excel.reader import SheetReadError, read_raw_sheet
from ..excel.rows import cell_at
from ..logging.init import enable_debug, log_summary, setup_logging
from ..models.config_models import VARIANT_RECEIPT_JOIN, ReconcileConfig
from ..models.day_result import DayResult
from ..services.dashboard import (
    SORT_COLUMNS,
    search_products,
    select_active_day,
    sort_products,
    stock_badge,
    summarize,
    top_products,
    trend_series,
)
from ..services.orchestrator import PipelineOutput, ProcessingError, process_source
from ..services.receipt_join import build_date_map
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (STOCK_SHEET_SOURCE) and the YAML config
- Fetch the sheet (or inventory + receipts with --receipts) and reconcile every day
- Print the selected day's table (search / sort applied), top items, the daily
  trend and the SUMMARY line
- Optionally write the renderer JSON payload (--output / config output)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
TOP_N = 5

SOURCE_ENV = "STOCK_SHEET_SOURCE"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv. Failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Daily stock sheet reconciler")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML config path")
    p.add_argument("--source", help="Sheet path or URL (overrides config / STOCK_SHEET_SOURCE)")
    p.add_argument("--receipts", help="Receipts sheet; treats --source as a flat inventory sheet (receipt_join)")
    p.add_argument("--output", help="Write reconciled days as JSON to this path")
    p.add_argument("--day", type=int, help="Day number to show (default: latest day with sales)")
    p.add_argument("--search", help="Filter table rows by name / code / category")
    p.add_argument("--sort", choices=sorted(SORT_COLUMNS), help="Sort table rows by column")
    p.add_argument("--desc", action="store_true", help="Sort descending")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header roles & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: ReconcileConfig) -> int:
    try:
        sheet = read_raw_sheet(cfg.source, sheet_name=cfg.sheet_name)
    except SheetReadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    layout = cfg.layout
    header = sheet[layout.header_row] if layout.header_row < len(sheet) else []
    width = max((len(r) for r in sheet), default=0)
    print(f"SOURCE: {cfg.source} rows={len(sheet)} cols={width}")
    if cfg.variant == VARIANT_RECEIPT_JOIN:
        return _inspect_receipts(cfg, sheet)
    for block in locate_day_blocks(header, width, layout):
        roles = [
            classify_header(
                cell_at(header, col), pos, cfg.vocabulary, cfg.positional_fallback
            ).value
            for pos, col in enumerate(block.columns)
        ]
        print(f"  DAY {block.day_number} [{block.date_label}] col={block.start_column} roles={roles}")
    for row in sheet[layout.header_row + 1 : layout.header_row + 4]:
        print("    sample_row=", row[: layout.base_offset])
    return EXIT_SUCCESS


def _inspect_receipts(cfg: ReconcileConfig, inventory: list[list[str]]) -> int:
    try:
        receipts = read_raw_sheet(cfg.receipts)
    except SheetReadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    date_map = build_date_map(receipts)
    print(f"RECEIPTS: {cfg.receipts} rows={len(receipts)} dated_receipts={len(date_map)}")
    print("  header=", inventory[0] if inventory else [])
    for row in inventory[1:4]:
        print("    sample_row=", row)
    return EXIT_SUCCESS


def _pick_day(output: PipelineOutput, day_number: int | None, logger) -> DayResult | None:
    if day_number is not None:
        for day in output.all_days:
            if day.day_number == day_number:
                return day
        logger.warning(f"day {day_number} not found -> showing latest day with sales")
    return select_active_day(output.days)


def _print_day(day: DayResult, search: str | None, sort: str | None, descending: bool) -> None:
    rows = sort_products(search_products(day.products, search), sort, descending)
    print(f"DAY {day.day_number} [{day.date_label}] products={len(rows)}")
    for r in rows:
        shown_remain = max(r.remain, 0)
        print(
            f"  {r.code}\t{r.name}\t{r.category}\t"
            f"bf={r.brought_forward} rcv={r.received} sold={r.sold} "
            f"waste={r.waste} remain={shown_remain} [{stock_badge(r.remain, r.sold)}]"
        )
    totals = summarize(rows)
    print(
        f"  TOTAL received={totals.received} sold={totals.sold} "
        f"waste={totals.waste} remain={totals.remain}"
    )
    for field in ("sold", "waste"):
        top = top_products(rows, field, TOP_N)
        if top:
            print(f"  TOP {field}: " + ", ".join(f"{name}={value}" for name, value in top))


def _print_trend(days: list[DayResult]) -> None:
    for point in trend_series(days):
        print(
            f"TREND day={point.day_number} [{point.date_label}] "
            f"received={point.received} sold={point.sold} "
            f"waste={point.waste} remain={point.remain}"
        )


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストで main([]) を許容)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    source_override = args.source or os.getenv(SOURCE_ENV)
    try:
        cfg = load_config(Path(args.config), source_override=source_override)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.output:
        cfg = dataclasses.replace(cfg, output=args.output)
    if args.receipts:
        cfg = dataclasses.replace(cfg, variant=VARIANT_RECEIPT_JOIN, receipts=args.receipts)

    logger.info(f"Reading sheet from: {cfg.source}")
    if cfg.variant == VARIANT_RECEIPT_JOIN:
        logger.info(f"Dating inventory rows with receipts: {cfg.receipts}")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        output = process_source(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    day = _pick_day(output, args.day, logger)
    if day is not None:
        _print_day(day, args.search, args.sort, args.desc)
    _print_trend(output.days)

    # log_summary が "SUMMARY " を付与するため先頭を除去
    summary_line = render_summary_line(output.result)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS
