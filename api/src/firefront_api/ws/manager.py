"""WebSocket subscribers for streaming spread frames."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks WebSocket subscribers per session and pushes events to them.

    Everything runs on the application's event loop. Renderer callbacks
    are synchronous, so they go through ``broadcast``, which schedules the
    send as a task and holds on to it until it finishes.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[WebSocket]] = {}
        self._pending: set[asyncio.Task] = set()

    def connection_count(self, session_id: str) -> int:
        return len(self._subscribers.get(session_id, ()))

    async def connect(self, session_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._subscribers.setdefault(session_id, []).append(websocket)
        logger.info(
            "Subscriber joined session %s (%d connected)",
            session_id,
            self.connection_count(session_id),
        )

    async def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        subscribers = self._subscribers.get(session_id)
        if subscribers is None:
            return
        remaining = [ws for ws in subscribers if ws is not websocket]
        if remaining:
            self._subscribers[session_id] = remaining
        else:
            del self._subscribers[session_id]
        logger.info("Subscriber left session %s", session_id)

    async def send_event(self, session_id: str, event: dict[str, Any]) -> None:
        """Send one event to every subscriber, dropping those that fail."""
        subscribers = list(self._subscribers.get(session_id, ()))
        if not subscribers:
            return

        message = json.dumps(event)
        results = await asyncio.gather(
            *(ws.send_text(message) for ws in subscribers), return_exceptions=True
        )
        for ws, result in zip(subscribers, results):
            if isinstance(result, Exception):
                logger.debug("Dropping subscriber of %s: %s", session_id, result)
                await self.disconnect(session_id, ws)

    def broadcast(self, session_id: str, event: dict[str, Any]) -> None:
        """Schedule an event send without waiting for it."""
        if session_id not in self._subscribers:
            return
        task = asyncio.get_running_loop().create_task(self.send_event(session_id, event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
