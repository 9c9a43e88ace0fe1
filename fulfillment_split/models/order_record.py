from __future__ import annotations

from dataclasses import dataclass

"""OrderRecord model.

An OrderRecord is one logical customer order rebuilt from the physical rows of
a report export. Rows may repeat the order number or leave it blank on
continuation rows; both end up in ``related_rows``.
"""

__all__ = [
    "OrderRecord",
]


@dataclass(frozen=True)
class OrderRecord:
    """Reconstructed order aggregated across its physical rows.

    Attributes:
        order_summary_number: Grouping key, never empty
        order_summary_id: Best-effort record identifier, may be empty or badly shaped
        fulfillment_locations: Distinct locations in first-seen order
        related_rows: Raw rows that contributed to this order, in encounter order
    """
    order_summary_number: str
    order_summary_id: str
    fulfillment_locations: tuple[str, ...]
    related_rows: tuple[tuple[str, ...], ...]

    @property
    def fulfillment_count(self) -> int:
        # 行数ではなく拠点のユニーク数
        return len(self.fulfillment_locations)

    @property
    def is_multi_location(self) -> bool:
        return self.fulfillment_count > 1
