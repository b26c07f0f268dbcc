"""Dashboard API: status counts, monthly buckets, top services, recent orders."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import require_admin
from donlustre.schemas import OrderRead, RiderRead
from donlustre.services.dashboard import filter_orders, order_board, summarize
from donlustre.services.order_status import STATUSES

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("")
async def get_dashboard(
    status: str = "",
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    """Refresh the order board from the store and aggregate over it."""
    if status and status not in STATUSES:
        raise HTTPException(400, f"Unknown status: {status}")

    rows = await crud.list_orders(db)
    order_board.load(OrderRead.model_validate(o) for o in rows)

    customers = {c.id: (c.name, c.phone) for c in await crud.list_customers(db)}
    orders = filter_orders(order_board.orders(), status=status or None, query=search, customers=customers)
    summary = summarize(orders, revenue=await crud.sum_receipt_totals(db))
    riders = await crud.list_riders(db)

    return {
        "total": summary.total,
        "revenue": summary.revenue,
        "by_status": summary.by_status,
        "monthly": summary.monthly,
        "top_services": summary.top_services,
        "recent": [
            {
                **o.model_dump(mode="json"),
                "customer_name": customers.get(o.customer_id or "", (None, None))[0],
                "customer_phone": customers.get(o.customer_id or "", (None, None))[1],
            }
            for o in summary.recent
        ],
        "riders": [RiderRead.model_validate(r).model_dump(mode="json") for r in riders[:6]],
    }
