"""Domain models for the stock sheet reconciler.

This package contains the domain model classes shared by the excel helpers,
the reconciliation services and the CLI.
"""

from .config_models import (
    DEFAULT_VOCABULARY,
    ActivityConfig,
    HeaderVocabulary,
    ReconcileConfig,
    SheetLayout,
    VARIANT_DAY_BLOCKS,
    VARIANT_RECEIPT_JOIN,
)
from .day_block import ColumnRole, DayBlock
from .day_result import DayResult
from .issue_record import IssueRecord
from .processing_result import ProcessingResult
from .row_data import (
    DayValues,
    ProductDayRecord,
    ProductRow,
    RowOutcome,
    SkippedRow,
    SkipReason,
    ValidRow,
)
from .snapshot import Snapshot, SnapshotStatus

__all__ = [
    # Configuration models
    "ActivityConfig",
    "DEFAULT_VOCABULARY",
    "HeaderVocabulary",
    "ReconcileConfig",
    "SheetLayout",
    "VARIANT_DAY_BLOCKS",
    "VARIANT_RECEIPT_JOIN",
    # Sheet structure
    "ColumnRole",
    "DayBlock",
    # Row / day models
    "DayResult",
    "DayValues",
    "ProductDayRecord",
    "ProductRow",
    "RowOutcome",
    "SkipReason",
    "SkippedRow",
    "ValidRow",
    # Run results
    "IssueRecord",
    "ProcessingResult",
    "Snapshot",
    "SnapshotStatus",
]
