import csv
import io
from datetime import datetime

from donlustre.models import Customer, Order, Rider
from donlustre.services.export import BOM, CSV_HEADERS, export_filename, export_orders_csv


def _order(order_id, notes=None, customer_id="c1", rider_id=None):
    return Order(
        id=order_id, customer_id=customer_id, rider_id=rider_id,
        service_type="Cleaning", material="Leather", quantity=2,
        pickup_address="Av. Reforma 10", notes=notes, status="received",
        created_at=datetime(2026, 3, 1, 9, 30),
    )


def _rows(text):
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):], newline="")))


def test_header_plus_one_row_per_order():
    customers = [Customer(id="c1", name="Lucia", phone="555-0101")]
    riders = [Rider(id="r1", name="Mario", phone="555-0202")]
    orders = [_order("o1", rider_id="r1"), _order("o2"), _order("o3")]

    rows = _rows(export_orders_csv(orders, customers, riders))
    assert rows[0] == CSV_HEADERS
    assert len(rows) == 4
    assert rows[1][:4] == ["o1", "Lucia", "555-0101", "received"]
    assert rows[1][8] == "Mario"
    assert rows[2][8] == "—"


def test_notes_newlines_become_spaces():
    text = export_orders_csv([_order("o1", notes="fragile\nhandle with care\r\nthanks")], [], [])
    rows = _rows(text)
    assert rows[1][9] == "fragile handle with care thanks"


def test_every_field_is_quoted_and_lines_end_with_crlf():
    text = export_orders_csv([_order("o1")], [], [])
    lines = text[len(BOM):].split("\r\n")
    assert lines[-1] == ""
    for line in lines[:-1]:
        fields = line.split('","')
        assert line.startswith('"') and line.endswith('"')
        assert len(fields) == len(CSV_HEADERS)


def test_unknown_customer_leaves_blank_name():
    rows = _rows(export_orders_csv([_order("o1", customer_id="missing")], [], []))
    assert rows[1][1] == ""
    assert rows[1][2] == ""


def test_export_filename():
    assert export_filename(datetime(2026, 10, 19, 8, 5, 3)) == "orders_2026-10-19T08-05-03.csv"
