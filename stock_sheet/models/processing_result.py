from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result model for one reconciliation run.

Aggregates the metrics printed on the SUMMARY line.
"""

__all__ = [
    "ProcessingResult",
]


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a single run over one sheet snapshot."""
    total_days: int  # 検出したデイブロック数
    kept_days: int  # day filter 後の日数
    products: int  # 有効な商品行数
    skipped_rows: int  # 商品行でないためスキップした行数
    negative_remain: int  # remain < 0 の (商品, 日) 件数
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
