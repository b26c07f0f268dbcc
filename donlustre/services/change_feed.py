"""Row-level change feed: pushes order INSERT/UPDATE events to subscribers."""

from __future__ import annotations

import json
import logging
from typing import Callable

from fastapi import WebSocket

logger = logging.getLogger(__name__)

Listener = Callable[[dict], None]


class ChangeFeed:
    def __init__(self):
        self._connections: dict[str, list[WebSocket]] = {}
        self._listeners: dict[str, list[Listener]] = {}

    async def connect(self, table: str, websocket: WebSocket):
        await websocket.accept()
        self._connections.setdefault(table, []).append(websocket)

    def disconnect(self, table: str, websocket: WebSocket):
        conns = self._connections.get(table, [])
        if websocket in conns:
            conns.remove(websocket)

    def subscribe(self, table: str, listener: Listener):
        """Register an in-process listener called for every event on ``table``."""
        self._listeners.setdefault(table, []).append(listener)

    def unsubscribe(self, table: str, listener: Listener):
        listeners = self._listeners.get(table, [])
        if listener in listeners:
            listeners.remove(listener)

    async def publish(self, table: str, event: str, record: dict):
        """Send an event to every listener and websocket subscribed to ``table``."""
        message = {"table": table, "event": event, "record": record}

        for listener in list(self._listeners.get(table, [])):
            try:
                listener(message)
            except Exception:
                logger.exception("Change feed listener failed for %s %s", table, event)

        conns = self._connections.get(table, [])
        dead = []
        text = json.dumps(message, default=str)
        for ws in conns:
            try:
                await ws.send_text(text)
            except Exception:
                logger.warning("Dropping dead %s feed subscriber", table)
                dead.append(ws)
        for ws in dead:
            conns.remove(ws)


change_feed = ChangeFeed()
