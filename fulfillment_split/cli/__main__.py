from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from fulfillment_split.config.loader import ConfigError, resolve_config
from fulfillment_split.excel.reader import SpreadsheetReadError
from fulfillment_split.logging.init import log_summary, set_debug, setup_logging
from fulfillment_split.models.column_mapping import ColumnMapping
from fulfillment_split.models.config_models import AnalyzerConfig
from fulfillment_split.services.orchestrator import (
    AnalysisError,
    EmptyTableError,
    analyze_all,
    analyze_file,
    scan_excel_files,
)
from fulfillment_split.services.report import render_order_report, render_rows_page
from fulfillment_split.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the config (--config, $FULFILLMENT_SPLIT_CONFIG, config/analyzer.yml, defaults)
- Collect input files (arguments, else source_directory)
- Analyze each file and print its multi-location order report
- Print the SUMMARY line and exit with 0 (all ok), 2 (some file failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv; a failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="fulfillment-split",
        description="Find orders fulfilled from more than one location in report exports",
    )
    p.add_argument("files", nargs="*", type=Path, help=".xlsx files (default: scan source_directory)")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--sheet", default=None, help="Sheet name (default: first sheet)")
    p.add_argument("--order-column", type=int, default=None, help="0-based order number column")
    p.add_argument("--location-column", type=int, default=None, help="0-based fulfillment location column")
    p.add_argument("--show-rows", action="store_true", help="List the related rows of the orders found")
    p.add_argument("--page", type=int, default=1, help="Page of related rows to show (with --show-rows)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected headers & first rows then exit")
    return p.parse_args(argv)


def _explicit_mapping(args: argparse.Namespace) -> ColumnMapping | None:
    """Column mapping forced from the command line, bypassing detection."""
    if args.order_column is None and args.location_column is None:
        return None
    if args.order_column is None or args.location_column is None:
        raise ValueError("--order-column and --location-column must be given together")
    if args.order_column < 0 or args.location_column < 0:
        raise ValueError("column indices must be >= 0")
    return ColumnMapping(args.order_column, args.location_column)


def _collect_files(args: argparse.Namespace, cfg: AnalyzerConfig) -> list[Path]:
    if args.files:
        return list(args.files)
    if not cfg.source_directory:
        raise AnalysisError("no input files given and no source_directory configured")
    return scan_excel_files(Path(cfg.source_directory))


def _inspect_data(
    files: list[Path], cfg: AnalyzerConfig, sheet: str | None, mapping: ColumnMapping | None = None
) -> int:
    if not files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            result = analyze_file(f, cfg, sheet=sheet, mapping=mapping)
        except (SpreadsheetReadError, EmptyTableError) as e:
            print(f"  read_error: {e}")
            continue
        print(f"  SHEET: {result.sheet_name} rows={len(result.raw_rows)}")
        print(f"  header_row={result.header.header_row_index + 1} rule={result.header.rule}")
        if result.header.is_fallback:
            print("  note: no header signature found, first row used as header")
        print(f"  headers={result.headers}")
        print(
            f"  order_column={result.mapping.order_summary_index} "
            f"location_column={result.mapping.fulfillment_location_index}"
        )
        print("    sample_rows=", result.data_rows[:3])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    try:
        mapping = _explicit_mapping(args)
    except ValueError as e:
        logger.error(f"arguments: {e}")
        return EXIT_FATAL

    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        files = _collect_files(args, cfg)
    except AnalysisError as e:
        logger.error(str(e))
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(files, cfg, args.sheet, mapping)

    logger.info(f"Analyzing {len(files)} file(s)")
    result = analyze_all(files, cfg, sheet=args.sheet, mapping=mapping)

    for analysis in result.analyses or []:
        for line in render_order_report(analysis, cfg.record_url_template):
            print(line)
        if args.show_rows and analysis.filtered_orders:
            for line in render_rows_page(analysis, page=args.page, page_size=cfg.page_size):
                print(line)

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
