"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from donlustre.api.router import api_router
from donlustre.config import get_settings
from donlustre.db import crud
from donlustre.db.engine import async_session_factory, create_tables
from donlustre.schemas import OrderRead
from donlustre.services.change_feed import change_feed
from donlustre.services.dashboard import order_board
from donlustre.services.storage import get_object_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    await create_tables()

    if settings.storage.auto_create_bucket:
        get_object_store().ensure_bucket()

    # Subscribe before the bulk load; the board merge makes the order irrelevant
    change_feed.subscribe("orders", order_board.on_feed_event)
    async with async_session_factory() as db:
        order_board.load(OrderRead.model_validate(o) for o in await crud.list_orders(db))
    logger.info("Order board primed with %d orders", len(order_board))

    yield
    change_feed.unsubscribe("orders", order_board.on_feed_event)


app = FastAPI(
    title="Don Lustre Admin",
    description="Admin API for a shoe and dry-cleaning pickup/delivery business.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "donlustre-admin"}
