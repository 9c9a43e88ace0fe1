from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .column_mapping import ColumnMapping
from .header import HeaderLocation
from .order_record import OrderRecord

"""Result models for the multi-location fulfillment analyzer.

AnalysisResult is what one spreadsheet produces; RunResult aggregates a CLI run
over several files for the SUMMARY line.
"""


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one sheet.

    ``raw_rows`` is the full decoded table (title rows included) for unconditional
    display; ``orders`` holds every reconstructed order and ``filtered_orders``
    the multi-location subset.
    """
    source_name: str  # File name (or caller supplied label)
    sheet_name: str
    raw_rows: list[list[str]]
    headers: list[str]  # Cleaned header labels
    header: HeaderLocation
    mapping: ColumnMapping
    orders: list[OrderRecord]
    filtered_orders: list[OrderRecord]

    @property
    def data_rows(self) -> list[list[str]]:
        return self.raw_rows[self.header.data_start_row:]

    @property
    def related_row_count(self) -> int:
        return sum(len(o.related_rows) for o in self.filtered_orders)


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics (internal helper for RunResult)."""
    file_name: str
    status: str  # success/failed
    orders: int  # reconstructed orders
    multi_location_orders: int
    related_rows: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class RunResult:
    """Aggregated results over all files analyzed by one CLI run."""
    success_files: int
    failed_files: int
    total_orders: int
    multi_location_orders: int
    related_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
    analyses: list[AnalysisResult] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
