"""Data export: orders as CSV."""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from typing import Iterable

from donlustre.models import Customer, Order, Rider

CSV_HEADERS = [
    "ID", "Customer", "Phone", "Status", "Service", "Material",
    "Quantity", "Address", "Rider", "Notes", "Created",
]

# UTF-8 BOM so spreadsheet apps detect the encoding
BOM = "\ufeff"


def export_orders_csv(
    orders: Iterable[Order],
    customers: Iterable[Customer],
    riders: Iterable[Rider],
) -> str:
    """One header row plus one row per order; every field quoted, CRLF line endings."""
    customer_map = {c.id: c for c in customers}
    rider_map = {r.id: r for r in riders}

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    for o in orders:
        customer = customer_map.get(o.customer_id or "")
        rider = rider_map.get(o.rider_id or "")
        notes = (o.notes or "").replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
        writer.writerow([
            o.id,
            customer.name if customer else "",
            customer.phone if customer else "",
            o.status,
            o.service_type,
            o.material or "",
            str(o.quantity),
            o.pickup_address or "",
            rider.name if rider else "—",
            notes,
            o.created_at.isoformat() if o.created_at else "",
        ])
    return BOM + buf.getvalue()


def export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"orders_{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"
