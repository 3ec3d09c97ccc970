from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.day_result import DayResult

"""Progress display with tqdm (TTY only).

One tqdm bar over the day blocks of a run. In non-TTY environments (CI,
piped output) no bar is created so no ANSI control sequences are emitted.
"""

__all__ = [
    "DayProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class DayProgress:
    """Progress bar over day blocks. Usable as ``on_day`` callback."""

    def __init__(self, total_days: int, *, description: str = "Reconciling days") -> None:
        self.total_days = total_days
        self.description = description
        self.current_day = 0
        self.active_days = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_days,
                desc=description,
                unit="day",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def __call__(self, day: DayResult) -> None:
        self.current_day += 1
        if day.has_activity:
            self.active_days += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(day=day.date_label, active=self.active_days)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> DayProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
