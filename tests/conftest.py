# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

# 1 日分のサブヘッダ (8 列): ยกมา / รับ x2 / ขาย x2 / เสีย / คงเหลือ / หมายเหตุ
DAY_SUB_HEADERS = [
    "ยกมา",
    "รับเข้า",
    "รับเข้า (ยอดรวม)",
    "ขายเงินสด",
    "ขายโอน",
    "ของเสีย",
    "คงเหลือ",
    "หมายเหตุ",
]
IDENTITY_HEADERS = ["โซน", "หมวด", "รหัส", "ชื่อสินค้า", "หน่วย", "", "", ""]


def _pad(values: list[str], width: int = 8) -> list[str]:
    return (list(values) + [""] * width)[:width]


def build_header_row(days: int) -> list[str]:
    row = list(IDENTITY_HEADERS)
    for day in range(1, days + 1):
        block = list(DAY_SUB_HEADERS)
        block[0] = f"{day} มี.ค. {block[0]}"
        row.extend(block)
    return row


def build_product_row(category: str, code: str, name: str, blocks: list[list[str]], days: int) -> list[str]:
    """blocks[i] = [bf, rcv1, rcv2, sold1, sold2, waste, remain, note] for day i+1."""
    row = ["A", category, code, name, "ชิ้น", "", "", ""]
    for day in range(days):
        row.extend(_pad(blocks[day] if day < len(blocks) else []))
    return row


@pytest.fixture()
def make_sheet():
    def _make(days: int, products: list[tuple[str, str, str, list[list[str]]]]) -> list[list[str]]:
        sheet = [build_header_row(days)]
        for category, code, name, blocks in products:
            sheet.append(build_product_row(category, code, name, blocks, days))
        return sheet
    return _make


@pytest.fixture()
def scenario_sheet(make_sheet) -> list[list[str]]:
    """1 product, 3 pre-allocated days; sheet movement on days 1-2, day 3 only carries stock."""
    return make_sheet(
        3,
        [
            (
                "BEV",
                "BEV005",
                "น้ำเปล่า น้ำทิพย์",
                [
                    ["10", "5", "5", "2", "1", "0", "", ""],
                    ["", "3", "", "3", "", "", "", ""],
                    [],
                ],
            )
        ],
    )


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source: ./data/stock.csv
output: ./out/days.json
layout:
  base_offset: 8
  block_width: 8
  max_days: 31
  category_column: 1
  code_column: 2
  name_column: 3
activity:
  include_carried_stock: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "stock_sheet.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv():
    def _write(path: Path, sheet: list[list[str]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(sheet).to_csv(path, header=False, index=False, encoding="utf-8")
        return path
    return _write
