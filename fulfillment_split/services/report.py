from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..models.analysis_result import AnalysisResult
from ..models.config_models import DEFAULT_PAGE_SIZE
from ..models.order_record import OrderRecord
from .identifier import build_record_url

"""Text rendering of analysis results for the CLI.

Two views: an order summary (one block per multi-location order) and a paged
listing of the related rows flattened across orders, each row tagged with the
order it belongs to. Paging is display only and never touches the analysis.
"""

__all__ = [
    "FlatRow",
    "Page",
    "flatten_related_rows",
    "meaningful_columns",
    "paginate",
    "render_order_report",
    "render_rows_page",
]

T = TypeVar("T")


@dataclass(frozen=True)
class FlatRow:
    order: OrderRecord
    row: tuple[str, ...]


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    number: int  # 1-based
    total_pages: int
    total_items: int
    start_index: int  # index of items[0] within the full sequence

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def flatten_related_rows(orders: Sequence[OrderRecord]) -> list[FlatRow]:
    return [FlatRow(order=o, row=r) for o in orders for r in o.related_rows]


def paginate(items: Sequence[T], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice ``items`` into a page; ``page`` is clamped to the valid range."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1: {page_size}")
    total_pages = max(1, math.ceil(len(items) / page_size))
    number = min(max(1, page), total_pages)
    start = (number - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        number=number,
        total_pages=total_pages,
        total_items=len(items),
        start_index=start,
    )


def meaningful_columns(headers: Sequence[str]) -> list[tuple[int, str]]:
    """(index, label) for headers that are not blank."""
    return [(i, h.strip()) for i, h in enumerate(headers) if h and h.strip()]


def _order_title(order: OrderRecord, url_template: str | None) -> list[str]:
    lines = [f"Order {order.order_summary_number} ({order.fulfillment_count} locations)"]
    if order.order_summary_id:
        lines.append(f"  ID: {order.order_summary_id}")
        url = build_record_url(order.order_summary_id, url_template)
        if url:
            lines.append(f"  Link: {url}")
    return lines


def render_order_report(result: AnalysisResult, url_template: str | None = None) -> list[str]:
    orders = result.filtered_orders
    if not orders:
        return [
            f"{result.source_name}: no orders with multiple fulfillment locations found",
        ]
    lines = [
        f"{result.source_name}: {len(orders)} orders with multiple fulfillment locations "
        f"({result.related_row_count} rows)",
    ]
    for order in orders:
        lines.extend(_order_title(order, url_template))
        lines.append(f"  Locations: {', '.join(order.fulfillment_locations)}")
        lines.append(f"  Rows: {len(order.related_rows)}")
    return lines


def render_rows_page(
    result: AnalysisResult, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> list[str]:
    """Tab-separated listing of one page of related rows, blank columns dropped."""
    columns = meaningful_columns(result.headers)
    current = paginate(flatten_related_rows(result.filtered_orders), page, page_size)
    lines = ["\t".join(["Order"] + [label for _, label in columns])]
    for flat in current.items:
        cells = [flat.row[i] if i < len(flat.row) else "" for i, _ in columns]
        lines.append("\t".join([flat.order.order_summary_number] + cells))
    lines.append(
        f"page {current.number}/{current.total_pages} "
        f"(rows {current.start_index + 1 if current.items else 0}-"
        f"{current.start_index + len(current.items)} of {current.total_items})"
    )
    return lines
