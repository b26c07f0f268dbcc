"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from donlustre.api.auth import router as auth_router
from donlustre.api.customers import router as customers_router
from donlustre.api.riders import router as riders_router
from donlustre.api.price_list import router as price_list_router
from donlustre.api.orders import router as orders_router
from donlustre.api.receipts import router as receipts_router
from donlustre.api.dashboard import router as dashboard_router
from donlustre.api.websocket import router as websocket_router
from donlustre.api.storage import router as storage_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(customers_router)
api_router.include_router(riders_router)
api_router.include_router(price_list_router)
api_router.include_router(orders_router)
api_router.include_router(receipts_router)
api_router.include_router(dashboard_router)
api_router.include_router(websocket_router)
api_router.include_router(storage_router)
