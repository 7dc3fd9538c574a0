# clinic_booking/services/realtime.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class EventSink:
    """Receives change events from the lifecycle services. Fire-and-forget."""

    def emit(self, event: str, payload: Any) -> None:
        raise NotImplementedError


class NullEventSink(EventSink):
    def emit(self, event: str, payload: Any) -> None:
        logger.debug("Event dropped (no sink): %s", event)


class ConnectionManager(EventSink):
    """
    Pushes {"event": ..., "data": ...} to every open WebSocket.

    emit() is safe to call from the threadpool that runs sync routes: the
    send is scheduled on the event loop the sockets were accepted on.
    """

    def __init__(self):
        self._connections: set[WebSocket] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        self._connections.add(websocket)
        logger.info("WebSocket connected (%d open)", len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info("WebSocket disconnected (%d open)", len(self._connections))

    async def broadcast(self, message: dict) -> None:
        for ws in list(self._connections):
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning("Dropping WebSocket after failed send: %s", e)
                self.disconnect(ws)

    def emit(self, event: str, payload: Any) -> None:
        loop = self._loop
        if not self._connections or loop is None or loop.is_closed():
            return
        message = {"event": event, "data": payload}
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            loop.create_task(self.broadcast(message))
        else:
            asyncio.run_coroutine_threadsafe(self.broadcast(message), loop)


broadcaster = ConnectionManager()
