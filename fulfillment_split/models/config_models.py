from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the multi-location fulfillment analyzer.

The loader in fulfillment_split/config/loader.py builds these from YAML; every
field has a default so the tool also runs without a config file.
"""

DEFAULT_HEADER_SCAN_ROWS = 20
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class ColumnLayout:
    """Positional fallbacks for the known report export layout.

    The export puts Order Summary Number in column 2 and Fulfilled Location in
    column 3 (0-based). These are used only when header text gives no answer.
    """
    order_number_index: int = 2
    location_index: int = 3


@dataclass(frozen=True)
class AnalyzerConfig:
    """Root configuration object for an analysis run."""
    source_directory: str | None = None  # Directory scanned when no files are given
    header_scan_rows: int = DEFAULT_HEADER_SCAN_ROWS  # Rows inspected for the header signature
    column_layout: ColumnLayout = field(default_factory=ColumnLayout)
    na_strings: list[str] | None = None  # Cell texts read as empty cells (opt-in, e.g. ["N/A"])
    record_url_template: str | None = None  # e.g. "https://host/lightning/r/OrderSummary/{record_id}/view"
    page_size: int = DEFAULT_PAGE_SIZE  # Rows per page in the related-rows view
