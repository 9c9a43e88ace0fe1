from __future__ import annotations

import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

"""Spreadsheet reader.

Decodes an .xlsx export into a rectangular table of text cells. Report exports
carry title/filter rows above the real header, so sheets are read with
``header=None`` and header detection happens later in the services layer.

Cell text rules:
- empty cells -> "" (cell text such as "NA" or "None" is kept as is)
- integral floats -> no trailing ".0" (order numbers come back as floats)
- datetimes -> ISO 8601
"""

SUPPORTED_SUFFIXES = (".xlsx",)


class SpreadsheetReadError(Exception):
    """Raised when a spreadsheet cannot be decoded. The message is user facing."""


@dataclass
class RawSheet:
    sheet_name: str
    rows: list[list[str]]


def validate_excel_path(path: Path) -> bool:
    """True when the file extension is one the reader can decode."""
    return path.suffix.lower() in SUPPORTED_SUFFIXES


def read_excel_file(
    path: Path,
    target_sheets: Iterable[str] | None = None,
    na_strings: list[str] | None = None,
    limit: int | None = None,
) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: Excel file path
    target_sheets: sheet names to keep (None means all sheets)
    na_strings: cell texts to read as empty cells (None means only truly empty cells)
    limit: parse at most this many of the selected sheets, in workbook order
    """
    # セルの文字列はそのまま残す ("NA" は North America かもしれない)
    na_values = list(na_strings) if na_strings else None

    wanted = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path, engine="openpyxl") as xls:
        for name in xls.sheet_names:
            if limit is not None and len(dfs) >= limit:
                break
            if wanted is not None and str(name) not in wanted:
                continue
            df = xls.parse(name, header=None, dtype=object, keep_default_na=False, na_values=na_values)
            dfs[str(name)] = df
    return dfs


def cell_to_text(value: Any) -> str:
    """Render one cell the way it reads in the spreadsheet UI."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_raw_table(df: pd.DataFrame) -> list[list[str]]:
    """Convert a header-less DataFrame into rows of cell text."""
    return [[cell_to_text(v) for v in raw] for raw in df.itertuples(index=False, name=None)]


def _describe_failure(path: Path, exc: Exception) -> str:
    text = str(exc)
    lowered = text.lower()
    if (
        isinstance(exc, zipfile.BadZipFile)
        or "corrupt" in lowered
        or "not a zip file" in lowered
        or "format cannot be determined" in lowered
    ):
        return (
            f"{path.name}: the file appears to be corrupted. "
            "Try opening it in Excel and saving it again."
        )
    if "unsupported" in lowered:
        return f"{path.name}: unsupported spreadsheet format. Please use .xlsx files."
    return f"{path.name}: failed to read spreadsheet: {text}"


def load_raw_table(
    path: Path, sheet: str | None = None, na_strings: list[str] | None = None
) -> RawSheet:
    """Decode one sheet of ``path`` into a RawSheet (first sheet by default).

    Raises:
        SpreadsheetReadError: missing file, unsupported type, corrupted or
            unreadable workbook, unknown sheet name
    """
    if not path.exists():
        raise SpreadsheetReadError(f"file not found: {path}")
    if not validate_excel_path(path):
        raise SpreadsheetReadError(
            f"{path.name}: unsupported spreadsheet format. Please use .xlsx files."
        )
    try:
        # 対象シート1枚だけを解析する (他のシートは読まない)
        dfs = read_excel_file(
            path,
            target_sheets=[sheet] if sheet is not None else None,
            na_strings=na_strings,
            limit=1,
        )
    except Exception as e:
        raise SpreadsheetReadError(_describe_failure(path, e)) from e

    if not dfs:
        if sheet is not None:
            raise SpreadsheetReadError(f"{path.name}: sheet not found: {sheet}")
        raise SpreadsheetReadError(f"{path.name}: workbook has no sheets")

    sheet_name, df = next(iter(dfs.items()))
    return RawSheet(sheet_name=sheet_name, rows=to_raw_table(df))
