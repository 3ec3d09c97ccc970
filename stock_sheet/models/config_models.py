from __future__ import annotations

from dataclasses import dataclass, field

from .day_block import ColumnRole

"""Config dataclasses for the stock sheet reconciler.

These are the typed views the engine works with. The YAML loader in
stock_sheet/config/loader.py builds them after schema validation.
"""

__all__ = [
    "ActivityConfig",
    "DEFAULT_VOCABULARY",
    "HeaderVocabulary",
    "ReconcileConfig",
    "SheetLayout",
    "VARIANT_DAY_BLOCKS",
    "VARIANT_RECEIPT_JOIN",
]

# 入力形式: 横長の日ブロックシート / 在庫 CSV + レシート CSV の結合
VARIANT_DAY_BLOCKS = "day_blocks"
VARIANT_RECEIPT_JOIN = "receipt_join"


@dataclass(frozen=True)
class SheetLayout:
    """Fixed geometry of the wide sheet.

    Columns before ``base_offset`` hold product identity fields, everything from
    ``base_offset`` onwards is repeating day blocks of ``block_width`` columns.
    """
    base_offset: int = 8
    block_width: int = 8
    max_days: int = 31  # 1 ヶ月分
    category_column: int = 1
    code_column: int = 2
    name_column: int = 3
    header_row: int = 0


@dataclass(frozen=True)
class HeaderVocabulary:
    """Ordered role -> keyword table used to classify header text.

    Order is priority: the first role with a keyword contained in the header wins.
    Keywords are stored lower-cased.
    """
    entries: tuple[tuple[ColumnRole, tuple[str, ...]], ...]

    @classmethod
    def from_mapping(cls, mapping: dict[str, list[str]]) -> HeaderVocabulary:
        entries = []
        for role_name, keywords in mapping.items():
            role = ColumnRole(role_name)
            cleaned = tuple(k.strip().lower() for k in keywords if k and k.strip())
            entries.append((role, cleaned))
        return cls(entries=tuple(entries))

    def roles(self) -> list[ColumnRole]:
        return [role for role, _ in self.entries]


DEFAULT_VOCABULARY = HeaderVocabulary.from_mapping(
    {
        "brought_forward": ["ยกมา", "ยอดยกมา", "brought forward", "bfwd", "b/f"],
        "waste": ["เสีย", "ทิ้ง", "waste", "discard"],
        "sold": ["ขาย", "ตัดสต็อก", "ตัดสต๊อก", "sold", "deduct"],
        "received": ["รับ", "received", "total", "รวม"],
    }
)


@dataclass(frozen=True)
class ActivityConfig:
    # False: only sheet movement (bf / received / sold / waste) marks a day as active
    include_carried_stock: bool = True


@dataclass(frozen=True)
class ReconcileConfig:
    """Root configuration object for one reconciliation run."""
    source: str  # local path or http(s) URL
    output: str | None = None  # JSON output path (optional)
    sheet_name: str | None = None  # xlsx only; None = first sheet
    layout: SheetLayout = field(default_factory=SheetLayout)
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY
    positional_fallback: tuple[ColumnRole, ...] | None = None
    activity: ActivityConfig = field(default_factory=ActivityConfig)
    variant: str = VARIANT_DAY_BLOCKS
    receipts: str | None = None  # receipt_join only: receipts sheet path or URL
