from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""IssueRecord model for the JSON Lines issue log.

Records rows that were skipped, sheets that could not be fetched and
reconciled figures that look wrong (negative remain). ``day`` and ``row`` use
-1 as the sentinel when the issue is not tied to a specific day or row.
"""

__all__ = [
    "IssueRecord",
]


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Sheet path or URL being processed
        day: Day number (1-based), -1 if not applicable
        row: Raw sheet row index, -1 if not applicable
        issue_type: Classification in UPPER_SNAKE_CASE format
        message: Human readable detail
    """
    timestamp: str
    source: str
    day: int
    row: int
    issue_type: str
    message: str

    @staticmethod
    def create(source: str, day: int, row: int, issue_type: str, message: str) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            source=source,
            day=day,
            row=row,
            issue_type=issue_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
