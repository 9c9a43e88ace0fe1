from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace

from ..models.column_mapping import ColumnMapping
from ..models.order_record import OrderRecord
from .identifier import find_order_summary_id, is_valid_record_id

"""Order reconstruction from report rows.

The fulfillment report writes one row per fulfilled item. The order number is
repeated on some rows and left blank on continuation rows, so a single forward
pass carries the last seen order number/id forward and groups rows by order
number. Groups collect distinct locations and the raw rows in encounter order.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "reconstruct_orders",
]

# Admitted rows logged individually at DEBUG level (short rows are not counted)
_TRACE_ROWS = 10


@dataclass(frozen=True)
class _CarryState:
    """Order context carried into continuation rows."""
    order_number: str = ""
    order_id: str = ""


@dataclass
class _OrderGroup:
    order_summary_number: str
    order_summary_id: str
    locations: dict[str, None] = field(default_factory=dict)  # insertion ordered set
    rows: list[tuple[str, ...]] = field(default_factory=list)

    def add(self, location: str, row: Sequence[str], candidate_id: str) -> None:
        self.locations.setdefault(location, None)
        self.rows.append(tuple(row))
        # 形式が正しい ID は後からでも上書き、未設定なら何でも採用
        if candidate_id and (is_valid_record_id(candidate_id) or not self.order_summary_id):
            self.order_summary_id = candidate_id

    def to_record(self) -> OrderRecord:
        return OrderRecord(
            order_summary_number=self.order_summary_number,
            order_summary_id=self.order_summary_id,
            fulfillment_locations=tuple(self.locations),
            related_rows=tuple(self.rows),
        )


def _text(row: Sequence[str], index: int) -> str:
    value = row[index]
    return "" if value is None else str(value).strip()


def reconstruct_orders(rows: Iterable[Sequence[str]], mapping: ColumnMapping) -> list[OrderRecord]:
    """Group data rows into OrderRecords.

    Args:
        rows: Data rows (header and title rows already skipped)
        mapping: Resolved column mapping

    Returns:
        One OrderRecord per distinct order number, in first-seen order.
        An unresolved mapping yields an empty list.

    Rows too short to cover both columns, rows without an order number before
    any order was seen, and rows with an empty location are left out of every
    group. None of these are errors.
    """
    if not mapping.resolved:
        return []

    order_index = mapping.order_summary_index
    location_index = mapping.fulfillment_location_index
    width = mapping.required_width

    state = _CarryState()
    groups: dict[str, _OrderGroup] = {}
    skipped = 0
    admitted = 0  # rows wide enough to be looked at

    for n, row in enumerate(rows):
        if len(row) < width:
            skipped += 1
            continue
        trace = admitted < _TRACE_ROWS
        admitted += 1

        order_number = _text(row, order_index)
        location = _text(row, location_index)
        candidate_id = find_order_summary_id(row, order_index)

        if order_number:
            state = replace(
                state, order_number=order_number, order_id=candidate_id or state.order_id
            )
        elif state.order_number:
            order_number = state.order_number
            candidate_id = state.order_id

        if not (order_number and location):
            if trace:
                logger.debug(
                    f"row {n + 1} ignored: order={bool(order_number)} location={bool(location)}"
                )
            skipped += 1
            continue

        group = groups.get(order_number)
        if group is None:
            group = groups[order_number] = _OrderGroup(order_number, candidate_id)
        group.add(location, row, candidate_id)

        if trace:
            logger.debug(
                f"row {n + 1}: order={order_number} id={candidate_id!r} location={location!r} "
                f"-> {len(group.locations)} location(s)"
            )

    logger.debug(f"reconstructed {len(groups)} orders ({skipped} rows not attributable)")
    return [g.to_record() for g in groups.values()]
