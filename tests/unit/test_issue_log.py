from __future__ import annotations

import json
from pathlib import Path

from stock_sheet.logging.issue_log import IssueLogBuffer, IssueRecord

ISSUE_KEYS = {"timestamp", "source", "day", "row", "issue_type", "message"}


def test_issue_record_creation_and_json_line():
    rec = IssueRecord.create(source="stock.csv", day=2, row=14, issue_type="NEGATIVE_REMAIN", message="remain=-3")
    data = json.loads(rec.to_json_line())
    assert data["source"] == "stock.csv"
    assert data["day"] == 2
    assert data["row"] == 14
    assert data["issue_type"] == "NEGATIVE_REMAIN"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == ISSUE_KEYS


def test_issue_record_keeps_thai_text():
    rec = IssueRecord.create("stock.csv", -1, 3, "MISSING_NAME", "น้ำเปล่า")
    assert "น้ำเปล่า" in rec.to_json_line()


def test_issue_log_buffer_flush(temp_workdir: Path):
    buf = IssueLogBuffer()
    buf.append(IssueRecord.create("s.csv", -1, 4, "MISSING_CODE", "row skipped"))
    buf.append(IssueRecord.create("s.csv", 3, -1, "NEGATIVE_REMAIN", "code=B1 remain=-1"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    assert path.name.startswith("issues-")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == ISSUE_KEYS
    assert len(buf) == 0


def test_issue_log_buffer_empty_flush_writes_nothing(tmp_path: Path):
    buf = IssueLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_issue_log_buffer_multiple_flushes_append(tmp_path: Path):
    buf = IssueLogBuffer(logs_dir=tmp_path)
    buf.append(IssueRecord.create("s.csv", 1, 1, "MISSING_NAME", "a"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(IssueRecord.create("s.csv", 1, 2, "MISSING_NAME", "b"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
