from datetime import date, datetime, timedelta

import pytest

from donlustre.schemas import OrderRead, RecordShapeError
from donlustre.services.dashboard import (
    OrderBoard, count_by_status, filter_orders, monthly_buckets, summarize, top_services,
)


def _order(order_id, status="received", updated=None, created=None, service="Cleaning",
           material="Leather", customer_id="c1", address="Calle 1"):
    created = created or datetime(2026, 10, 1, 12, 0)
    return OrderRead(
        id=order_id, customer_id=customer_id, service_type=service, material=material,
        quantity=1, pickup_address=address, status=status,
        created_at=created, updated_at=updated or created,
    )


def _event(order, event="UPDATE"):
    return {"table": "orders", "event": event, "record": order.model_dump(mode="json")}


def test_feed_event_before_bulk_load_is_not_overwritten_by_stale_row():
    board = OrderBoard()
    t0 = datetime(2026, 10, 1, 12, 0)
    board.apply(_event(_order("o1", status="processing", updated=t0 + timedelta(minutes=5))))
    board.load([_order("o1", status="received", updated=t0)])
    assert len(board) == 1
    assert board.get("o1").status == "processing"


def test_insert_event_after_bulk_load_does_not_duplicate():
    board = OrderBoard()
    order = _order("o1")
    board.load([order])
    board.apply(_event(order, event="INSERT"))
    assert len(board) == 1


def test_newer_update_replaces_row():
    board = OrderBoard()
    t0 = datetime(2026, 10, 1, 12, 0)
    board.load([_order("o1", updated=t0)])
    kept = board.apply(_event(_order("o1", status="ready", updated=t0 + timedelta(seconds=1))))
    assert kept
    assert board.get("o1").status == "ready"


def test_malformed_event_raises_typed_error():
    board = OrderBoard()
    with pytest.raises(RecordShapeError):
        board.apply({"table": "orders", "event": "UPDATE", "record": {"id": "o1"}})


def test_feed_listener_skips_malformed_events():
    board = OrderBoard()
    board.on_feed_event({"table": "orders", "event": "DELETE", "record": {}})
    assert len(board) == 0


def test_orders_are_newest_first():
    board = OrderBoard()
    board.load([
        _order("old", created=datetime(2026, 1, 1)),
        _order("new", created=datetime(2026, 9, 1)),
    ])
    assert [o.id for o in board.orders()] == ["new", "old"]


def test_count_by_status_is_zero_filled():
    counts = count_by_status([_order("a", "ready"), _order("b", "ready"), _order("c", "delivered")])
    assert counts == {"received": 0, "processing": 0, "ready": 2, "enroute": 0, "delivered": 1}


def test_monthly_buckets_cover_last_six_months():
    orders = [
        _order("a", created=datetime(2026, 10, 3)),
        _order("b", created=datetime(2026, 10, 15)),
        _order("c", created=datetime(2026, 6, 1)),
        _order("d", created=datetime(2026, 1, 1)),  # outside the window
    ]
    buckets = monthly_buckets(orders, today=date(2026, 10, 19))
    assert [b["month"] for b in buckets] == [
        "2026-05", "2026-06", "2026-07", "2026-08", "2026-09", "2026-10",
    ]
    assert [b["count"] for b in buckets] == [0, 1, 0, 0, 0, 2]
    assert buckets[-1]["label"] == "Oct"


def test_monthly_buckets_cross_year_boundary():
    buckets = monthly_buckets([_order("a", created=datetime(2025, 11, 2))], today=date(2026, 2, 1))
    assert buckets[0]["month"] == "2025-09"
    assert buckets[2] == {"month": "2025-11", "label": "Nov", "count": 1}


def test_top_services_sorted_by_count():
    orders = [
        _order("a", service="Cleaning", material="Suede"),
        _order("b", service="Express", material="Leather"),
        _order("c", service="Express", material="Leather"),
    ]
    assert top_services(orders) == [
        {"name": "Express (Leather)", "count": 2},
        {"name": "Cleaning (Suede)", "count": 1},
    ]


def test_filter_by_status_and_search():
    customers = {"c1": ("Lucia Perez", "555-0101"), "c2": ("Mario", "555-0202")}
    orders = [
        _order("a", status="ready", customer_id="c1"),
        _order("b", status="ready", customer_id="c2", address="Av. Juarez"),
        _order("c", status="received", customer_id="c1"),
    ]
    assert [o.id for o in filter_orders(orders, status="ready")] == ["a", "b"]
    assert [o.id for o in filter_orders(orders, query="lucia", customers=customers)] == ["a", "c"]
    assert [o.id for o in filter_orders(orders, query="juarez", customers=customers)] == ["b"]
    assert [o.id for o in filter_orders(orders, status="ready", query="0101", customers=customers)] == ["a"]


def test_summarize_limits_recent_orders():
    orders = [_order(f"o{i}") for i in range(12)]
    summary = summarize(orders, revenue=99.999, today=date(2026, 10, 19))
    assert summary.total == 12
    assert len(summary.recent) == 8
    assert summary.revenue == 100.0
    assert summary.by_status["received"] == 12
