from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "NOT_FOUND",
    "ColumnMapping",
]

NOT_FOUND = -1


@dataclass(frozen=True)
class ColumnMapping:
    """Column indices used by the order reconstructor.

    Either index may be NOT_FOUND (-1) when detection could not resolve it.
    """
    order_summary_index: int
    fulfillment_location_index: int

    @property
    def resolved(self) -> bool:
        return self.order_summary_index >= 0 and self.fulfillment_location_index >= 0

    @property
    def required_width(self) -> int:
        """Minimum row length that covers both columns."""
        return max(self.order_summary_index, self.fulfillment_location_index) + 1
