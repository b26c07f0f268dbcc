"""Table operations for the admin store.

Writes to ``orders`` publish INSERT/UPDATE events on the change feed.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from donlustre.models import Customer, Rider, Order, PriceListItem, Receipt, Sequence
from donlustre.schemas.order import OrderRead
from donlustre.services.change_feed import change_feed

logger = logging.getLogger(__name__)

ORDER_LIST_LIMIT = 500


# ── Sequences ─────────────────────────────────────────────

async def next_sequence_value(db: AsyncSession, name: str) -> int:
    """Increment and return a named counter inside the caller's transaction."""
    result = await db.execute(
        update(Sequence).where(Sequence.name == name).values(value=Sequence.value + 1)
    )
    if result.rowcount == 0:
        start = await db.scalar(select(func.max(Order.order_number))) if name == "orders" else None
        db.add(Sequence(name=name, value=(start or 0) + 1))
        await db.flush()
    return await db.scalar(select(Sequence.value).where(Sequence.name == name))


# ── Customers ─────────────────────────────────────────────

async def create_customer(db: AsyncSession, name: str, phone: str, whatsapp_id: str | None = None) -> Customer:
    customer = Customer(name=name, phone=phone, whatsapp_id=whatsapp_id or None)
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


async def list_customers(db: AsyncSession, search: str | None = None) -> list[Customer]:
    stmt = select(Customer).order_by(Customer.created_at.desc())
    if search:
        like = f"%{search.lower()}%"
        stmt = stmt.where(
            func.lower(Customer.name).like(like)
            | func.lower(Customer.phone).like(like)
            | func.lower(func.coalesce(Customer.whatsapp_id, "")).like(like)
        )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_customer(db: AsyncSession, customer_id: str) -> Customer | None:
    return await db.get(Customer, customer_id)


# ── Riders ────────────────────────────────────────────────

async def create_rider(db: AsyncSession, name: str, phone: str, zone: str | None = None) -> Rider:
    rider = Rider(name=name, phone=phone, zone=zone or None)
    db.add(rider)
    await db.commit()
    await db.refresh(rider)
    return rider


async def list_riders(db: AsyncSession, active_only: bool = False) -> list[Rider]:
    stmt = select(Rider).order_by(Rider.created_at.desc())
    if active_only:
        stmt = stmt.where(Rider.is_active == True)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_rider(db: AsyncSession, rider_id: str) -> Rider | None:
    return await db.get(Rider, rider_id)


async def toggle_rider_active(db: AsyncSession, rider: Rider) -> Rider:
    rider.is_active = not rider.is_active
    await db.commit()
    await db.refresh(rider)
    return rider


# ── Price list ────────────────────────────────────────────

async def list_price_items(db: AsyncSession) -> list[PriceListItem]:
    result = await db.execute(select(PriceListItem).order_by(PriceListItem.created_at.desc()))
    return list(result.scalars().all())


async def get_price_item(db: AsyncSession, service_type: str, material: str | None) -> PriceListItem | None:
    """Look up a price row by (service_type, material), ignoring case and surrounding spaces."""
    result = await db.execute(
        select(PriceListItem).where(
            func.lower(PriceListItem.service_type) == (service_type or "").strip().lower(),
            func.lower(PriceListItem.material) == (material or "").strip().lower(),
        )
    )
    return result.scalars().first()


async def upsert_price_item(
    db: AsyncSession, service_type: str, material: str,
    base_price: float, express_price: float | None = None,
) -> PriceListItem:
    """Insert or update keyed by (service_type, material).

    Keys differing only in case update the existing row, which keeps its
    original spelling.
    """
    item = await get_price_item(db, service_type, material)
    if item is None:
        item = PriceListItem(service_type=service_type.strip(), material=material.strip())
        db.add(item)
    item.base_price = base_price
    item.express_price = express_price
    await db.commit()
    await db.refresh(item)
    return item


# ── Orders ────────────────────────────────────────────────

async def _publish_order(event: str, order: Order) -> None:
    record = OrderRead.model_validate(order).model_dump(mode="json")
    await change_feed.publish("orders", event, record)


async def create_order(
    db: AsyncSession, customer_id: str, service_type: str, material: str,
    quantity: int, pickup_address: str, notes: str | None = None,
    pickup_lat: float | None = None, pickup_lng: float | None = None,
) -> Order:
    order = Order(
        customer_id=customer_id,
        service_type=service_type,
        material=material,
        quantity=quantity,
        pickup_address=pickup_address,
        notes=notes,
        pickup_lat=pickup_lat,
        pickup_lng=pickup_lng,
        status="received",
    )
    order.order_number = await next_sequence_value(db, "orders")
    db.add(order)
    await db.commit()
    await db.refresh(order)
    await _publish_order("INSERT", order)
    return order


async def get_order(db: AsyncSession, order_id: str) -> Order | None:
    return await db.get(Order, order_id)


async def get_orders_by_ids(db: AsyncSession, order_ids: list[str]) -> dict[str, Order]:
    if not order_ids:
        return {}
    result = await db.execute(select(Order).where(Order.id.in_(set(order_ids))))
    return {o.id: o for o in result.scalars().all()}


async def list_orders(
    db: AsyncSession, status: str | None = None, limit: int = ORDER_LIST_LIMIT,
) -> list[Order]:
    stmt = select(Order).order_by(Order.created_at.desc()).limit(limit)
    if status:
        stmt = stmt.where(Order.status == status)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_order(db: AsyncSession, order: Order, **kwargs) -> Order:
    for k, v in kwargs.items():
        setattr(order, k, v)
    await db.commit()
    await db.refresh(order)
    await _publish_order("UPDATE", order)
    return order


async def count_orders_created_through(db: AsyncSession, created_at: datetime) -> int:
    """Number of orders created at or before ``created_at``."""
    return await db.scalar(
        select(func.count()).select_from(Order).where(Order.created_at <= created_at)
    ) or 0


# ── Receipts ──────────────────────────────────────────────

async def get_receipt_for_order(db: AsyncSession, order_id: str) -> Receipt | None:
    result = await db.execute(select(Receipt).where(Receipt.order_id == order_id))
    return result.scalars().first()


async def upsert_receipt(
    db: AsyncSession, order_id: str, receipt_url: str | None, total_amount: float | None,
) -> Receipt:
    """Insert or update the single receipt row of an order."""
    receipt = await get_receipt_for_order(db, order_id)
    if receipt is None:
        receipt = Receipt(order_id=order_id)
        db.add(receipt)
    receipt.receipt_url = receipt_url
    receipt.total_amount = total_amount
    await db.commit()
    await db.refresh(receipt)
    return receipt


async def list_receipts(db: AsyncSession, pending_upload_only: bool = False) -> list[Receipt]:
    stmt = select(Receipt).order_by(Receipt.created_at.desc())
    if pending_upload_only:
        stmt = stmt.where(Receipt.receipt_url.is_(None))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def sum_receipt_totals(db: AsyncSession) -> float:
    return float(await db.scalar(select(func.coalesce(func.sum(Receipt.total_amount), 0))) or 0)
