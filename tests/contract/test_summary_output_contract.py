from __future__ import annotations

import re
from datetime import UTC, datetime

from stock_sheet.models.processing_result import ProcessingResult
from stock_sheet.services.summary import render_summary_line

"""SUMMARY 行フォーマット契約テスト."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+days=([0-9]+)/([0-9]+)\s+products=([0-9]+)\s+skipped_rows=([0-9]+)\s+"
    r"negative_remain=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = "SUMMARY days=3/31 products=120 skipped_rows=4 negative_remain=0 elapsed_sec=0.84"
    assert SUMMARY_PATTERN.match(line), "SUMMARY line should match contract regex"


def test_rendered_line_matches_pattern():
    t = datetime(2026, 3, 1, tzinfo=UTC)
    result = ProcessingResult(
        total_days=31, kept_days=2, products=5, skipped_rows=1,
        negative_remain=1, start_time=t, end_time=t, elapsed_seconds=0.0042,
    )
    m = SUMMARY_PATTERN.match(render_summary_line(result))
    assert m
    assert int(m.group(1)) <= int(m.group(2))
