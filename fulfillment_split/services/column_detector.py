from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..models.column_mapping import NOT_FOUND, ColumnMapping
from ..models.config_models import ColumnLayout

"""Column auto-detection for the order number and fulfillment location.

Each column is resolved by an ordered list of rules; the first rule returning
an index wins. The fixed export layout (Order Summary Number in column 2,
Fulfilled Location in column 3) is checked first and used again as the last
resort, both through ColumnLayout so other layouts can be configured.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ORDER_NUMBER_PHRASE",
    "LOCATION_PHRASES",
    "detect_columns",
    "detect_order_number_column",
    "detect_location_column",
    "find_column",
]

ORDER_NUMBER_PHRASE = "order summary number"
# Preference order checked against each header in turn
LOCATION_PHRASES = ("fulfilled location", "fulfillment location", "location name", "location")

Rule = Callable[[Sequence[str], int], int]


def _contains(header: str | None, phrase: str) -> bool:
    return bool(header) and phrase in header.lower()


def find_column(headers: Sequence[str], phrase: str) -> int:
    """Index of the first header containing ``phrase`` (case-insensitive), or -1."""
    for i, h in enumerate(headers):
        if _contains(h, phrase.lower()):
            return i
    return NOT_FOUND


def _at_position(phrase: str) -> Rule:
    def rule(headers: Sequence[str], position: int) -> int:
        if len(headers) > position and _contains(headers[position], phrase):
            return position
        return NOT_FOUND
    return rule


def _by_phrases(phrases: Sequence[str]) -> Rule:
    def rule(headers: Sequence[str], position: int) -> int:
        for i, h in enumerate(headers):
            if any(_contains(h, p) for p in phrases):
                return i
        return NOT_FOUND
    return rule


def _positional_default(headers: Sequence[str], position: int) -> int:
    return position if len(headers) > position else NOT_FOUND


ORDER_NUMBER_RULES: list[tuple[str, Rule]] = [
    ("layout_position", _at_position(ORDER_NUMBER_PHRASE)),
    ("header_scan", _by_phrases((ORDER_NUMBER_PHRASE,))),
    ("positional_default", _positional_default),
]

LOCATION_RULES: list[tuple[str, Rule]] = [
    ("layout_position", _at_position("location")),
    ("header_scan", _by_phrases(LOCATION_PHRASES)),
    ("positional_default", _positional_default),
]


def _resolve(rules: list[tuple[str, Rule]], headers: Sequence[str], position: int, label: str) -> int:
    for name, rule in rules:
        index = rule(headers, position)
        if index != NOT_FOUND:
            logger.debug(f"{label} column -> {index} (rule={name}) header={headers[index]!r}")
            return index
    logger.debug(f"{label} column not found")
    return NOT_FOUND


def detect_order_number_column(headers: Sequence[str], layout: ColumnLayout | None = None) -> int:
    layout = layout or ColumnLayout()
    return _resolve(ORDER_NUMBER_RULES, headers, layout.order_number_index, "order summary number")


def detect_location_column(headers: Sequence[str], layout: ColumnLayout | None = None) -> int:
    layout = layout or ColumnLayout()
    return _resolve(LOCATION_RULES, headers, layout.location_index, "fulfillment location")


def detect_columns(headers: Sequence[str], layout: ColumnLayout | None = None) -> ColumnMapping:
    """Guess the order number and location columns from cleaned headers.

    Args:
        headers: Cleaned header labels
        layout: Positional fallbacks (defaults to columns 2 and 3)

    Returns:
        ColumnMapping; either index may be -1 when unresolved
    """
    return ColumnMapping(
        order_summary_index=detect_order_number_column(headers, layout),
        fulfillment_location_index=detect_location_column(headers, layout),
    )
