from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering.

Format:
SUMMARY days={kept}/{total} products={n} skipped_rows={n} negative_remain={n} elapsed_sec={x}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2026, 2, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     total_days=31, kept_days=3, products=12, skipped_rows=4,
        ...     negative_remain=0, start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY days=3/31 products=12 skipped_rows=4 negative_remain=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY days={result.kept_days}/{result.total_days} "
        f"products={result.products} "
        f"skipped_rows={result.skipped_rows} "
        f"negative_remain={result.negative_remain} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
