from __future__ import annotations

import re
from collections.abc import Callable, Sequence

"""Order Summary record identifier helpers.

Record ids are Salesforce-style: 15 or 18 ASCII letters/digits. Only the shape
is checked (no checksum). The id is not at a fixed column in every export, so
neighbouring columns of the order number are searched in a fixed order.
"""

__all__ = [
    "is_valid_record_id",
    "find_order_summary_id",
    "build_record_url",
]

_RECORD_ID = re.compile(r"[A-Za-z0-9]{15}|[A-Za-z0-9]{18}")

Candidate = Callable[[Sequence[str], int], str | None]


def is_valid_record_id(value: str | None) -> bool:
    """True when ``value`` trimmed is exactly 15 or 18 ASCII alphanumerics."""
    if not value:
        return False
    return _RECORD_ID.fullmatch(value.strip()) is not None


def _cell(row: Sequence[str], index: int) -> str | None:
    if 0 <= index < len(row):
        return row[index]
    return None


def _before(row: Sequence[str], order_index: int) -> str | None:
    return _cell(row, order_index - 1) if order_index > 0 else None


def _first(row: Sequence[str], order_index: int) -> str | None:
    return _cell(row, 0)


def _after(row: Sequence[str], order_index: int) -> str | None:
    return _cell(row, order_index + 1)


# Order matters: the export normally places the id right before the number
ID_CANDIDATES: list[Candidate] = [_before, _first, _after]


def find_order_summary_id(row: Sequence[str], order_index: int) -> str:
    """Best record id candidate for a row.

    Returns the first shape-valid candidate (trimmed). Without one, falls back
    to the trimmed text of the column before the order number, which may be
    empty or badly shaped.
    """
    for candidate in ID_CANDIDATES:
        value = candidate(row, order_index)
        if value and is_valid_record_id(value):
            return value.strip()

    fallback = _before(row, order_index)
    return fallback.strip() if fallback else ""


def build_record_url(record_id: str, template: str | None) -> str | None:
    """External link for a record, or None when no link should be offered."""
    if not template or not is_valid_record_id(record_id):
        return None
    return template.format(record_id=record_id.strip())
