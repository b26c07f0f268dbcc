"""Orders API: list/create, status changes, rider assignment, CSV export."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.db import crud
from donlustre.db.engine import get_db
from donlustre.dependencies import get_session_state, require_admin
from donlustre.models import Order
from donlustre.schemas import OrderCreate, OrderListItem, OrderRead, RiderAssign
from donlustre.services.auth import SessionState
from donlustre.services.dashboard import filter_orders
from donlustre.services.export import export_filename, export_orders_csv
from donlustre.services.order_status import STATUSES, advance_to, next_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"], dependencies=[Depends(require_admin)])


def _list_item(order: Order) -> OrderListItem:
    item = OrderListItem.model_validate(order)
    if order.customer:
        item.customer_name = order.customer.name
        item.customer_phone = order.customer.phone
    if order.rider:
        item.rider_name = order.rider.name
    return item


async def _get_order_or_404(db: AsyncSession, order_id: str) -> Order:
    order = await crud.get_order(db, order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


async def _filtered_orders(db: AsyncSession, status: str, search: str, limit: int) -> list[Order]:
    if status and status not in STATUSES:
        raise HTTPException(400, f"Unknown status: {status}")
    orders = await crud.list_orders(db, status=status or None, limit=limit)
    if not search.strip():
        return orders
    customers = {
        o.customer.id: (o.customer.name, o.customer.phone) for o in orders if o.customer
    }
    keep = {o.id for o in filter_orders(
        [OrderRead.model_validate(o) for o in orders], query=search, customers=customers,
    )}
    return [o for o in orders if o.id in keep]


@router.get("", response_model=list[OrderListItem])
async def list_orders(
    status: str = "",
    search: str = "",
    limit: int = crud.ORDER_LIST_LIMIT,
    db: AsyncSession = Depends(get_db),
):
    orders = await _filtered_orders(db, status, search, limit)
    return [_list_item(o) for o in orders]


@router.post("", response_model=OrderListItem, status_code=201)
async def create_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db),
):
    customer = await crud.get_customer(db, body.customer_id)
    if not customer:
        raise HTTPException(400, "Customer does not exist")
    order = await crud.create_order(
        db,
        customer_id=body.customer_id,
        service_type=body.service_type.strip(),
        material=body.material.strip(),
        quantity=body.quantity,
        pickup_address=body.pickup_address.strip(),
        notes=body.notes,
        pickup_lat=body.pickup_lat,
        pickup_lng=body.pickup_lng,
    )
    return _list_item(order)


@router.get("/export.csv")
async def export_orders(
    status: str = "",
    search: str = "",
    db: AsyncSession = Depends(get_db),
):
    orders = await _filtered_orders(db, status, search, crud.ORDER_LIST_LIMIT)
    customers = await crud.list_customers(db)
    riders = await crud.list_riders(db)
    body = export_orders_csv(orders, customers, riders)
    return Response(
        content=body.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/{order_id}", response_model=OrderListItem)
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    return _list_item(await _get_order_or_404(db, order_id))


@router.post("/{order_id}/advance", response_model=OrderListItem)
async def advance_order(order_id: str, db: AsyncSession = Depends(get_db)):
    """Move the order to its next status. Delivered orders stay delivered."""
    order = await _get_order_or_404(db, order_id)
    new_status = next_status(order.status)
    if new_status != order.status:
        order = await crud.update_order(db, order, status=new_status)
    return _list_item(order)


@router.post("/{order_id}/ready", response_model=OrderListItem)
async def mark_ready(order_id: str, db: AsyncSession = Depends(get_db)):
    order = await _get_order_or_404(db, order_id)
    new_status = advance_to(order.status, "ready")
    if new_status != order.status:
        order = await crud.update_order(db, order, status=new_status)
    return _list_item(order)


@router.post("/{order_id}/assign", response_model=OrderListItem)
async def assign_rider(
    order_id: str,
    body: RiderAssign,
    db: AsyncSession = Depends(get_db),
):
    order = await _get_order_or_404(db, order_id)
    rider = await crud.get_rider(db, body.rider_id)
    if not rider:
        raise HTTPException(404, "Rider not found")
    order = await crud.update_order(
        db, order, rider_id=rider.id, status=advance_to(order.status, "enroute"),
    )
    return _list_item(order)


@router.post("/{order_id}/auto-assign", response_model=OrderListItem)
async def auto_assign_rider(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    state: SessionState = Depends(get_session_state),
):
    """Assign the next rider in round-robin order for this admin session."""
    order = await _get_order_or_404(db, order_id)
    riders = await crud.list_riders(db)
    rider = state.assigner.pick(riders)
    if rider is None:
        raise HTTPException(409, "No riders available")
    logger.info("Auto-assigning rider %s to order %s", rider.id, order.id)
    order = await crud.update_order(
        db, order, rider_id=rider.id, status=advance_to(order.status, "enroute"),
    )
    return _list_item(order)
