from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from donlustre.config import get_settings
from donlustre.db.engine import async_session_factory
from donlustre.services.auth import validate_session
from donlustre.services.change_feed import change_feed

router = APIRouter(tags=["websocket"])


@router.websocket("/api/ws/orders")
async def orders_feed(
    websocket: WebSocket,
    token: str = Query(default=""),
):
    # Session cookie or ?token= query param
    token = token or websocket.cookies.get(get_settings().session_cookie_name, "")
    async with async_session_factory() as db:
        found = await validate_session(token, db) if token else None
    if not found:
        await websocket.close(code=4001, reason="Unauthorized")
        return

    await change_feed.connect("orders", websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        change_feed.disconnect("orders", websocket)
