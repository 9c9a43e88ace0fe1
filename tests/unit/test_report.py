from __future__ import annotations

import pytest

from fulfillment_split.models.order_record import OrderRecord
from fulfillment_split.services.orchestrator import analyze_table
from fulfillment_split.services.report import (
    flatten_related_rows,
    meaningful_columns,
    paginate,
    render_order_report,
    render_rows_page,
)

TEMPLATE = "https://sf.example/lightning/r/OrderSummary/{record_id}/view"


def test_paginate_basic():
    page = paginate(list(range(120)), page=2, page_size=50)
    assert page.items == list(range(50, 100))
    assert (page.number, page.total_pages, page.total_items, page.start_index) == (2, 3, 120, 50)
    assert page.has_previous and page.has_next


def test_paginate_clamps_page_number():
    assert paginate(list(range(10)), page=9, page_size=4).number == 3
    assert paginate(list(range(10)), page=0, page_size=4).number == 1


def test_paginate_empty():
    page = paginate([], page=1)
    assert page.items == []
    assert page.total_pages == 1
    assert not page.has_next


def test_paginate_rejects_bad_page_size():
    with pytest.raises(ValueError):
        paginate([1], page_size=0)


def test_flatten_related_rows_tags_each_row_with_order():
    a = OrderRecord("A", "", ("x", "y"), (("A", "x"), ("", "y")))
    b = OrderRecord("B", "", ("x", "z"), (("B", "x"), ("B", "z")))
    flat = flatten_related_rows([a, b])
    assert [f.order.order_summary_number for f in flat] == ["A", "A", "B", "B"]
    assert flat[1].row == ("", "y")


def test_meaningful_columns_drops_blank_headers():
    assert meaningful_columns(["A", "", "  ", "D "]) == [(0, "A"), (3, "D")]


def test_render_order_report(report_table):
    result = analyze_table(report_table, source_name="fulfillment.xlsx")
    lines = render_order_report(result, TEMPLATE)
    assert lines[0] == "fulfillment.xlsx: 2 orders with multiple fulfillment locations (5 rows)"
    assert "Order OS-0001 (2 locations)" in lines
    assert "  ID: 0a3Hs000000AbCdEAA" in lines
    assert f"  Link: {TEMPLATE.format(record_id='0a3Hs000000AbCdEAA')}" in lines
    assert "  Locations: Warehouse North, Warehouse South" in lines
    assert "  Locations: Store 12, Warehouse South" in lines
    assert not any("OS-0002" in line for line in lines)


def test_render_order_report_without_template_has_no_link(report_table):
    result = analyze_table(report_table, source_name="f.xlsx")
    assert not any(line.startswith("  Link:") for line in render_order_report(result))


def test_render_order_report_nothing_found():
    table = [["Order Summary Number", "Fulfilled Location"], ["A", "x"], ["B", "y"]]
    result = analyze_table(table, source_name="single.xlsx")
    assert render_order_report(result) == [
        "single.xlsx: no orders with multiple fulfillment locations found"
    ]


def test_render_rows_page(report_table):
    result = analyze_table(report_table, source_name="f.xlsx")
    lines = render_rows_page(result, page=1, page_size=2)
    assert lines[0].split("\t") == [
        "Order", "Account", "Order Summary ID", "Order Summary Number", "Fulfilled Location", "Product",
    ]
    assert lines[1].split("\t") == [
        "OS-0001", "Acme", "0a3Hs000000AbCdEAA", "OS-0001", "Warehouse North", "Pan",
    ]
    assert lines[2].split("\t")[0] == "OS-0001"
    assert lines[-1] == "page 1/3 (rows 1-2 of 5)"
