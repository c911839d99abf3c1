"""WebSocket registry and outbound broadcast pump."""

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks connected clients and broadcasts engine events to all of them.

    Engine code is synchronous, so events are queued by :meth:`publish` and
    sent by the :meth:`run_pump` task on the event loop.
    """

    def __init__(self):
        self.connections: list[WebSocket] = []
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def publish(self, event: str, payload: Any) -> None:
        self._queue.put_nowait({"type": event, "payload": payload})

    async def run_pump(self) -> None:
        """Drain queued events to every connection until cancelled."""
        while True:
            try:
                message = await self._queue.get()
                await self.broadcast(message)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error broadcasting event: {e}")

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Broadcast message to all connected clients."""
        dead_connections = []
        for websocket in self.connections:
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed: {e}")
                dead_connections.append(websocket)

        # Remove dead connections
        for conn in dead_connections:
            self.remove_connection(conn)

    def add_connection(self, websocket: WebSocket) -> None:
        self.connections.append(websocket)
        logger.info(f"Client connected ({len(self.connections)} total)")

    def remove_connection(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"Client disconnected ({len(self.connections)} total)")
