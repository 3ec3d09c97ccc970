from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any
from urllib.request import urlopen

import pandas as pd

"""Sheet reader.

Reads the wide stock sheet as a raw text grid (RawSheet). No header is
applied: row 0 is the header row and the engine decides what every column
means. Supported sources:
- .csv  : local path or http(s) URL (published Google Sheet CSV export 等)
- .xlsx / .xlsm : local path or URL, first sheet unless sheet_name is given
"""

__all__ = [
    "RawSheet",
    "SheetReadError",
    "dataframe_to_raw_sheet",
    "is_url",
    "read_raw_sheet",
]

RawSheet = list[list[str]]

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
URL_TIMEOUT_SEC = 30


class SheetReadError(Exception):
    """Raised when the sheet cannot be fetched or parsed."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _suffix(source: str) -> str:
    # URL のクエリ部分 (?format=csv 等) は除外して拡張子を判定
    path_part = source.split("?", 1)[0]
    suffix = Path(path_part).suffix.lower()
    if not suffix and "format=xlsx" in source:
        return ".xlsx"
    return suffix


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def dataframe_to_raw_sheet(df: pd.DataFrame) -> RawSheet:
    """Convert a headerless DataFrame into a list of text rows.

    Trailing blank cells are kept so every row has the sheet's full width.
    """
    return [[_cell_text(v) for v in raw] for raw in df.itertuples(index=False, name=None)]


def _read_csv_text(source: str) -> str:
    if is_url(source):
        with urlopen(source, timeout=URL_TIMEOUT_SEC) as resp:
            return resp.read().decode("utf-8-sig")
    return Path(source).read_text(encoding="utf-8-sig")


def _max_field_count(text: str) -> int:
    # 行ごとの列数は不揃い (手編集 / 途中で日ブロック追加) なので最大列数を採用
    return max((len(fields) for fields in csv.reader(io.StringIO(text))), default=0)


def _read_csv(source: str) -> pd.DataFrame | None:
    text = _read_csv_text(source)
    width = _max_field_count(text)
    if width == 0:
        return None
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )


def read_raw_sheet(source: str | Path, sheet_name: str | None = None) -> RawSheet:
    """Read a CSV or Excel source into a RawSheet.

    Parameters
    ----------
    source: ローカルパス または http(s) URL
    sheet_name: Excel のみ。None なら先頭シート

    Rows shorter than the widest row are padded with "" (CSV rows may be
    ragged; the header row is not assumed to be the widest).

    Raises
    ------
    SheetReadError: source missing, unreachable or unparsable
    """
    text_source = str(source)
    if not is_url(text_source) and not Path(text_source).exists():
        raise SheetReadError(f"sheet source not found: {text_source}")

    suffix = _suffix(text_source)
    try:
        if suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(
                text_source,
                sheet_name=sheet_name if sheet_name is not None else 0,
                header=None,
                dtype=object,
            )
        else:
            df = _read_csv(text_source)
    except pd.errors.EmptyDataError:
        return []
    except Exception as e:
        raise SheetReadError(f"failed to read sheet {text_source}: {e}") from e
    if df is None:
        return []
    return dataframe_to_raw_sheet(df)
