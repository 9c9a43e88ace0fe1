from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SpreadsheetReadError, load_raw_table
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.analysis_result import AnalysisResult, FileStat, RunResult
from ..models.column_mapping import ColumnMapping
from ..models.config_models import AnalyzerConfig
from .column_detector import detect_columns
from .header_locator import clean_headers, locate_header
from .order_filter import filter_multi_location_orders
from .order_reconstructor import reconstruct_orders
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Pipeline orchestration.

analyze_table runs the pure pipeline over an in-memory table:
header location -> header cleaning -> column detection -> order
reconstruction -> multi-location filter. analyze_file adds the spreadsheet
reader in front; analyze_all runs a batch of files, recording failures in the
error log and aggregating metrics for the SUMMARY line.
"""


class AnalysisError(Exception):
    """Base exception for analysis errors."""
    pass


class EmptyTableError(AnalysisError):
    """The decoded sheet has no rows."""
    pass


def scan_excel_files(directory: Path) -> list[Path]:
    """Scan directory for .xlsx files (non-recursive), sorted by name.

    Raises:
        AnalysisError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise AnalysisError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise AnalysisError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".xlsx")
    except OSError as e:
        raise AnalysisError(f"Error reading directory {directory}: {e}") from e


def analyze_table(
    raw_rows: Sequence[Sequence[str]],
    *,
    source_name: str = "<table>",
    sheet_name: str = "",
    config: AnalyzerConfig | None = None,
    mapping: ColumnMapping | None = None,
) -> AnalysisResult:
    """Run header detection, column detection, reconstruction and filtering.

    Args:
        raw_rows: Decoded table, title rows included
        source_name: Label used in log messages and the result
        sheet_name: Sheet the rows came from
        config: Scan window and positional layout (defaults when None)
        mapping: Explicit column mapping; skips auto-detection when given

    Returns:
        AnalysisResult. An unresolved mapping is logged as a warning and gives
        empty order lists instead of failing.

    Raises:
        EmptyTableError: raw_rows is empty
    """
    config = config or AnalyzerConfig()
    rows = [list(r) for r in raw_rows]
    if not rows:
        raise EmptyTableError(f"{source_name}: no data found in spreadsheet")

    header = locate_header(rows, scan_rows=config.header_scan_rows)
    if header.is_fallback:
        logger.debug(
            f"{source_name}: no header signature in the first {config.header_scan_rows} rows, using row 1"
        )
    headers = clean_headers(rows[header.header_row_index])
    data_rows = rows[header.data_start_row:]
    logger.debug(f"{source_name}: headers={headers} data starts at row {header.data_start_row + 1}")

    if mapping is None:
        mapping = detect_columns(headers, config.column_layout)

    if mapping.resolved:
        orders = reconstruct_orders(data_rows, mapping)
    else:
        logger.warning(
            f"{source_name}: could not detect order number/location columns "
            f"(order={mapping.order_summary_index} location={mapping.fulfillment_location_index})"
        )
        orders = []

    filtered = filter_multi_location_orders(orders)
    logger.info(
        f"{source_name}: {len(orders)} orders, {len(filtered)} with multiple fulfillment locations"
    )
    return AnalysisResult(
        source_name=source_name,
        sheet_name=sheet_name,
        raw_rows=rows,
        headers=headers,
        header=header,
        mapping=mapping,
        orders=orders,
        filtered_orders=filtered,
    )


def analyze_file(
    path: Path,
    config: AnalyzerConfig | None = None,
    *,
    sheet: str | None = None,
    mapping: ColumnMapping | None = None,
) -> AnalysisResult:
    """Read ``path`` and analyze it.

    Raises:
        SpreadsheetReadError: the file could not be decoded
        EmptyTableError: the sheet has no rows
    """
    config = config or AnalyzerConfig()
    raw = load_raw_table(path, sheet=sheet, na_strings=config.na_strings)
    logger.debug(f"{path.name}: read {len(raw.rows)} rows from sheet '{raw.sheet_name}'")
    return analyze_table(
        raw.rows, source_name=path.name, sheet_name=raw.sheet_name, config=config, mapping=mapping
    )


def analyze_all(
    paths: Sequence[Path],
    config: AnalyzerConfig | None = None,
    *,
    sheet: str | None = None,
    mapping: ColumnMapping | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> RunResult:
    """Analyze every file, continuing past files that fail.

    Failed files are recorded in ``error_log`` (flushed before returning) and
    counted in RunResult.failed_files.
    """
    config = config or AnalyzerConfig()
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    start_time = datetime.now(UTC)

    analyses: list[AnalysisResult] = []
    file_stats: list[FileStat] = []

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                result = analyze_file(path, config, sheet=sheet, mapping=mapping)
            except (SpreadsheetReadError, EmptyTableError) as e:
                error_type = "NO_DATA" if isinstance(e, EmptyTableError) else "READ_ERROR"
                logger.error(str(e))
                error_log.append(ErrorRecord.create(path.name, sheet or "", -1, error_type, str(e)))
                file_stats.append(
                    FileStat(
                        file_name=path.name,
                        status="failed",
                        orders=0,
                        multi_location_orders=0,
                        related_rows=0,
                        elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                        error=str(e),
                    )
                )
                progress.finish_file(success=False)
                progress.set_postfix(failed=progress.failed_files)
                continue

            analyses.append(result)
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status="success",
                    orders=len(result.orders),
                    multi_location_orders=len(result.filtered_orders),
                    related_rows=result.related_row_count,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                )
            )
            progress.finish_file(success=True)
            progress.set_postfix(multi=len(result.filtered_orders), failed=progress.failed_files)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    succeeded = [s for s in file_stats if s.status == "success"]
    return RunResult(
        success_files=len(succeeded),
        failed_files=len(file_stats) - len(succeeded),
        total_orders=sum(s.orders for s in succeeded),
        multi_location_orders=sum(s.multi_location_orders for s in succeeded),
        related_rows=sum(s.related_rows for s in succeeded),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        analyses=analyses,
    )
