import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from donlustre.models import Base
from donlustre.db import crud
from donlustre.services.change_feed import change_feed


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


async def test_create_and_list_customers(db):
    await crud.create_customer(db, "Lucia", "555-0101", "")
    await crud.create_customer(db, "Mario", "555-0202", "wa-mario")

    customers = await crud.list_customers(db)
    assert {c.name for c in customers} == {"Lucia", "Mario"}
    lucia = next(c for c in customers if c.name == "Lucia")
    assert lucia.whatsapp_id is None

    found = await crud.list_customers(db, search="wa-MAR")
    assert [c.name for c in found] == ["Mario"]


async def test_toggle_rider(db):
    rider = await crud.create_rider(db, "Ana", "555-0303", "Norte")
    assert rider.is_active is True
    rider = await crud.toggle_rider_active(db, rider)
    assert rider.is_active is False
    assert await crud.list_riders(db, active_only=True) == []


async def test_price_list_upsert_by_service_and_material(db):
    first = await crud.upsert_price_item(db, "Cleaning", "Leather", 10.0, None)
    second = await crud.upsert_price_item(db, "Cleaning", "Leather", 12.0, 18.0)
    await crud.upsert_price_item(db, "Cleaning", "Suede", 14.0)

    assert first.id == second.id
    items = await crud.list_price_items(db)
    assert len(items) == 2
    item = await crud.get_price_item(db, "Cleaning", "Leather")
    assert item.base_price == 12.0
    assert item.express_price == 18.0


async def test_price_list_keys_ignore_case(db):
    first = await crud.upsert_price_item(db, "Express", "Suede", 8.0, 12.0)
    second = await crud.upsert_price_item(db, "EXPRESS", " suede ", 9.0, 13.0)

    assert first.id == second.id
    assert second.service_type == "Express"
    assert len(await crud.list_price_items(db)) == 1

    item = await crud.get_price_item(db, "express", "SUEDE")
    assert item.base_price == 9.0


async def test_get_orders_by_ids(db):
    customer = await crud.create_customer(db, "Lucia", "555-0101")
    o1 = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 1")
    o2 = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 2")

    found = await crud.get_orders_by_ids(db, [o1.id, o2.id, o1.id, "missing"])
    assert set(found) == {o1.id, o2.id}
    assert found[o1.id].customer.name == "Lucia"
    assert await crud.get_orders_by_ids(db, []) == {}


async def test_order_numbers_come_from_a_persisted_sequence(db):
    customer = await crud.create_customer(db, "Lucia", "555-0101")
    o1 = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 1")
    o2 = await crud.create_order(db, customer.id, "Cleaning", "Suede", 2, "Calle 2")
    assert (o1.order_number, o2.order_number) == (1, 2)
    assert o1.status == "received"
    assert o1.customer.name == "Lucia"


async def test_order_writes_publish_feed_events(db):
    events = []
    change_feed.subscribe("orders", events.append)
    try:
        customer = await crud.create_customer(db, "Lucia", "555-0101")
        order = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 1")
        await crud.update_order(db, order, status="processing")
    finally:
        change_feed.unsubscribe("orders", events.append)

    assert [e["event"] for e in events] == ["INSERT", "UPDATE"]
    assert events[1]["record"]["status"] == "processing"
    assert events[1]["record"]["id"] == order.id


async def test_receipt_upsert_keeps_one_row_per_order(db):
    customer = await crud.create_customer(db, "Lucia", "555-0101")
    order = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 1")

    await crud.upsert_receipt(db, order.id, None, 32.55)
    await crud.upsert_receipt(db, order.id, "/storage/receipts/orders/x.pdf", 32.55)

    receipts = await crud.list_receipts(db)
    assert len(receipts) == 1
    assert receipts[0].receipt_url == "/storage/receipts/orders/x.pdf"
    assert await crud.list_receipts(db, pending_upload_only=True) == []
    assert await crud.sum_receipt_totals(db) == 32.55


async def test_count_orders_created_through(db):
    customer = await crud.create_customer(db, "Lucia", "555-0101")
    o1 = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 1")
    o2 = await crud.create_order(db, customer.id, "Cleaning", "Leather", 1, "Calle 2")
    assert await crud.count_orders_created_through(db, o1.created_at) == 1
    assert await crud.count_orders_created_through(db, o2.created_at) == 2
