from __future__ import annotations

import dataclasses

import pytest

from fulfillment_split.models import (
    NOT_FOUND,
    AnalyzerConfig,
    ColumnLayout,
    ColumnMapping,
    HeaderLocation,
    OrderRecord,
)


def test_column_mapping_resolved_and_width():
    mapping = ColumnMapping(order_summary_index=2, fulfillment_location_index=3)
    assert mapping.resolved
    assert mapping.required_width == 4
    assert not ColumnMapping(NOT_FOUND, 3).resolved


def test_header_location_fallback_flag():
    assert HeaderLocation(0, 1).is_fallback
    assert not HeaderLocation(4, 5, rule="full_signature").is_fallback


def test_order_record_count_ignores_row_count():
    order = OrderRecord(
        order_summary_number="OS-1",
        order_summary_id="",
        fulfillment_locations=("A",),
        related_rows=(("OS-1", "A"), ("", "A"), ("", "A")),
    )
    assert order.fulfillment_count == 1
    assert not order.is_multi_location


def test_models_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        ColumnMapping(0, 1).order_summary_index = 5  # type: ignore[misc]


def test_config_defaults():
    cfg = AnalyzerConfig()
    assert cfg.header_scan_rows == 20
    assert cfg.page_size == 50
    assert cfg.column_layout == ColumnLayout(order_number_index=2, location_index=3)
    assert cfg.record_url_template is None
