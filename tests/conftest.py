# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from fulfillment_split.logging.init import reset_logging

# Layout of the real report export: title block, header, item rows.
# Header at row index 2; OS-0001 and OS-0003 span two locations, OS-0002 one.
REPORT_ROWS: list[list[object]] = [
    ["Order Fulfillment Report", None, None, None, None],
    ["Filtered By: Status equals Fulfilled", None, None, None, None],
    ["Account", "Order Summary ID ↓", "Order Summary Number", "Fulfilled Location", "Product"],
    ["Acme", "0a3Hs000000AbCdEAA", "OS-0001", "Warehouse North", "Pan"],
    [None, None, None, "Warehouse South", "Lid"],
    ["Beta", "0a3Hs000000XyZwQAA", "OS-0002", "Warehouse North", "Knife"],
    [None, None, None, "Warehouse North", "Fork"],
    ["Gamma", "0a3Hs000000QwErTAA", "OS-0003", "Store 12", "Pot"],
    [None, None, "OS-0003", "Warehouse South", "Spoon"],
    [None, None, None, "Store 12", "Ladle"],
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("FULFILLMENT_SPLIT_CONFIG", raising=False)
        monkeypatch.delenv("RECORD_URL_TEMPLATE", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # ハンドラは生成時の sys.stdout を掴むのでテスト毎に作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
header_scan_rows: 20
column_layout:
  order_number_index: 2
  location_index: 3
record_url_template: "https://example.my.salesforce.com/lightning/r/OrderSummary/{record_id}/view"
page_size: 50
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "analyzer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def excel_factory() -> Callable[[Path, str, dict[str, list[list[object]]]], Path]:
    """Write a header-less workbook with the rows exactly as given."""
    def _make(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
        path = directory / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def report_rows() -> list[list[object]]:
    return [list(r) for r in REPORT_ROWS]


@pytest.fixture()
def report_table() -> list[list[str]]:
    """REPORT_ROWS as the reader would decode them."""
    return [["" if c is None else str(c) for c in r] for r in REPORT_ROWS]


@pytest.fixture()
def report_excel(temp_workdir: Path, report_rows, excel_factory) -> Path:
    return excel_factory(temp_workdir / "data", "fulfillment.xlsx", {"Report": report_rows})
