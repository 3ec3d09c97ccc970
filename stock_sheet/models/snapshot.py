from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

"""Snapshot model and SnapshotStatus enum.

A snapshot is the output of one successful fetch + reconciliation. Each reload
builds a new snapshot from scratch; a failed reload keeps the previous one.
"""

__all__ = [
    "Snapshot",
    "SnapshotStatus",
]


class SnapshotStatus(Enum):
    """Outcome of a reload request.

    - LOADED: a new snapshot replaced the previous one
    - FAILED: fetch/parse failed, previous snapshot (if any) kept
    - BUSY: another reconciliation pass was in flight, request ignored
    """
    LOADED = "loaded"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True)
class Snapshot:
    source: str
    loaded_at: datetime
    output: Any  # PipelineOutput (services.orchestrator)
