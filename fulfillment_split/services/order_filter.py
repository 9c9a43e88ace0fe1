from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.order_record import OrderRecord

logger = logging.getLogger(__name__)

__all__ = [
    "filter_multi_location_orders",
]


def filter_multi_location_orders(orders: Iterable[OrderRecord]) -> list[OrderRecord]:
    """Keep orders fulfilled from more than one distinct location, order preserved."""
    orders = list(orders)
    filtered = [o for o in orders if o.is_multi_location]
    if not filtered and orders:
        logger.debug(
            "no multi-location orders; location counts: "
            + ", ".join(f"{o.order_summary_number}={o.fulfillment_count}" for o in orders)
        )
    return filtered
