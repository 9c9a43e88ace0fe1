from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from ..models.config_models import DEFAULT_HEADER_SCAN_ROWS
from ..models.header import HeaderLocation

"""Header row location and header text cleaning.

Report exports put a title block (report name, filters, run date) above the
real column headers. The locator scans the top of the sheet for the header
signature of the order fulfillment report; the first row matching any rule
wins, rules are tried in order for each row.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "HEADER_RULES",
    "clean_header",
    "clean_headers",
    "locate_header",
]

FULL_SIGNATURE = ("order summary id", "order summary number", "fulfilled location")

# Sort indicators added by the export tool
_ARROWS = re.compile(r"[↓↑]")


def _full_signature(text: str) -> bool:
    return all(phrase in text for phrase in FULL_SIGNATURE)


def _partial_signature(text: str) -> bool:
    return "order summary" in text and ("location" in text or "fulfillment" in text)


HEADER_RULES: list[tuple[str, Callable[[str], bool]]] = [
    ("full_signature", _full_signature),
    ("partial_signature", _partial_signature),
]


def _row_text(row: Sequence[str]) -> str:
    return " ".join("" if c is None else str(c) for c in row).lower()


def locate_header(
    rows: Sequence[Sequence[str]], scan_rows: int = DEFAULT_HEADER_SCAN_ROWS
) -> HeaderLocation:
    """Find the header row within the first ``scan_rows`` rows.

    Empty rows never match. When nothing matches, row 0 is treated as the
    header. An empty table also yields the fallback; callers reject empty
    input before getting here.

    Args:
        rows: Raw table (rows of cell text)
        scan_rows: Number of leading rows to inspect

    Returns:
        HeaderLocation with data_start_row = header_row_index + 1
    """
    for i in range(min(scan_rows, len(rows))):
        row = rows[i]
        if not row:
            continue
        text = _row_text(row)
        for name, matches in HEADER_RULES:
            if matches(text):
                logger.debug(f"header found at row {i + 1} (rule={name})")
                return HeaderLocation(header_row_index=i, data_start_row=i + 1, rule=name)

    logger.debug("no header signature found, using first row as header")
    return HeaderLocation(header_row_index=0, data_start_row=1, rule="fallback")


def clean_header(text: str | None) -> str:
    """Strip sort arrows and surrounding whitespace from a header label."""
    if text is None:
        return ""
    return _ARROWS.sub("", str(text)).strip()


def clean_headers(row: Sequence[str | None]) -> list[str]:
    return [clean_header(c) for c in row]
