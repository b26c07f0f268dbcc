"""Dashboard aggregator over a merged in-memory view of the orders table.

The board is fed from two sources: bulk fetches from the store and
change-feed events. Both go through the same merge rule (by id, newest
updated_at wins) so their arrival order does not matter.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable

from donlustre.schemas.feed import FeedEvent, RecordShapeError
from donlustre.schemas.order import OrderRead
from donlustre.services.order_status import STATUSES

logger = logging.getLogger(__name__)

RECENT_LIMIT = 8
MONTH_WINDOW = 6


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class OrderBoard:
    def __init__(self):
        self._orders: dict[str, OrderRead] = {}

    def __len__(self) -> int:
        return len(self._orders)

    def get(self, order_id: str) -> OrderRead | None:
        return self._orders.get(order_id)

    def merge(self, order: OrderRead) -> bool:
        """Keep ``order`` unless the board already holds a newer version. Returns True if kept."""
        current = self._orders.get(order.id)
        if current is not None and _aware(current.updated_at) > _aware(order.updated_at):
            return False
        self._orders[order.id] = order
        return True

    def load(self, orders: Iterable[OrderRead]) -> None:
        for order in orders:
            self.merge(order)

    def apply(self, payload: dict) -> bool:
        """Merge a raw change-feed message."""
        event = FeedEvent.parse(payload)
        return self.merge(event.record)

    def on_feed_event(self, payload: dict) -> None:
        """Change-feed listener: malformed events are logged and skipped."""
        try:
            self.apply(payload)
        except RecordShapeError as e:
            logger.warning("Ignoring malformed feed event: %s", e)

    def orders(self) -> list[OrderRead]:
        """All orders, newest first."""
        return sorted(self._orders.values(), key=lambda o: _aware(o.created_at), reverse=True)

    def clear(self) -> None:
        self._orders.clear()


@dataclass
class DashboardSummary:
    total: int
    by_status: dict[str, int]
    monthly: list[dict]
    top_services: list[dict]
    recent: list[OrderRead]
    revenue: float = 0.0


def filter_orders(
    orders: Iterable[OrderRead],
    status: str | None = None,
    query: str | None = None,
    customers: dict[str, tuple[str, str]] | None = None,
) -> list[OrderRead]:
    """Filter by exact status and by a substring of customer name/phone or pickup address."""
    customers = customers or {}
    needle = (query or "").strip().lower()
    result = []
    for o in orders:
        if status and o.status != status:
            continue
        if needle:
            name, phone = customers.get(o.customer_id or "", ("", ""))
            haystack = f"{name} {phone} {o.pickup_address or ''}".lower()
            if needle not in haystack:
                continue
        result.append(o)
    return result


def count_by_status(orders: Iterable[OrderRead]) -> dict[str, int]:
    counts = {s: 0 for s in STATUSES}
    for o in orders:
        counts[o.status] = counts.get(o.status, 0) + 1
    return counts


def monthly_buckets(orders: Iterable[OrderRead], today: date | None = None, months: int = MONTH_WINDOW) -> list[dict]:
    """Order counts for the last ``months`` calendar months, oldest first."""
    today = today or datetime.now(timezone.utc).date()
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    keys.reverse()

    counts = Counter((o.created_at.year, o.created_at.month) for o in orders)
    return [
        {
            "month": f"{y:04d}-{m:02d}",
            "label": date(y, m, 1).strftime("%b"),
            "count": counts.get((y, m), 0),
        }
        for y, m in keys
    ]


def top_services(orders: Iterable[OrderRead], limit: int = 5) -> list[dict]:
    counts = Counter(f"{o.service_type} ({o.material})" for o in orders)
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return [{"name": name, "count": count} for name, count in ranked[:limit]]


def summarize(orders: list[OrderRead], revenue: float = 0.0, today: date | None = None) -> DashboardSummary:
    return DashboardSummary(
        total=len(orders),
        by_status=count_by_status(orders),
        monthly=monthly_buckets(orders, today=today),
        top_services=top_services(orders),
        recent=orders[:RECENT_LIMIT],
        revenue=round(revenue, 2),
    )


order_board = OrderBoard()
