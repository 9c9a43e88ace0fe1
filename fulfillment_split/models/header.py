from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "HeaderLocation",
]


@dataclass(frozen=True)
class HeaderLocation:
    """Where the header row sits inside a report export.

    Rows before ``data_start_row`` are never grouped; the raw table is kept
    untouched for display.
    """
    header_row_index: int  # 0-based index of the header row
    data_start_row: int  # first row holding data (header_row_index + 1)
    rule: str = "fallback"  # name of the rule that matched

    @property
    def is_fallback(self) -> bool:
        return self.rule == "fallback"
