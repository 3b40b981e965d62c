"""
WebSocket connection registry for the live notification channel.

Maps user id -> active connections so fan-out can target recipients, and
supports practice-wide broadcasts for cache invalidation events. Delivery
is best-effort: there is no replay, durable notifications cover gaps.
"""

from typing import Dict, Set
from uuid import UUID
import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks authenticated WebSocket connections per user."""

    def __init__(self):
        # user_id -> set of active WebSocket connections
        self._connections: Dict[UUID, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: UUID):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.setdefault(user_id, set()).add(websocket)
        logger.info("ws connected user=%s total=%d", user_id, self.get_total_connections())

    async def disconnect(self, websocket: WebSocket, user_id: UUID):
        """Remove a WebSocket connection."""
        async with self._lock:
            self._discard(user_id, [websocket])

    def _discard(self, user_id: UUID, sockets: list[WebSocket]) -> None:
        # caller holds the lock
        if user_id not in self._connections:
            return
        for ws in sockets:
            self._connections[user_id].discard(ws)
        if not self._connections[user_id]:
            del self._connections[user_id]

    async def send_to_user(self, user_id: UUID, message: dict) -> int:
        """Send a message to every connection of one user. Returns deliveries."""
        async with self._lock:
            connections = self._connections.get(user_id, set()).copy()

        if not connections:
            return 0

        data = json.dumps(message, default=str)
        closed = []
        delivered = 0

        for ws in connections:
            try:
                await ws.send_text(data)
                delivered += 1
            except Exception:
                # Connection closed or errored
                closed.append(ws)

        if closed:
            async with self._lock:
                self._discard(user_id, closed)

        return delivered

    async def broadcast(self, message: dict) -> int:
        """Send a message to every connected user."""
        async with self._lock:
            user_ids = list(self._connections.keys())

        delivered = 0
        for user_id in user_ids:
            delivered += await self.send_to_user(user_id, message)
        return delivered

    def get_connected_count(self, user_id: UUID) -> int:
        """Get the number of active connections for a user."""
        return len(self._connections.get(user_id, set()))

    def get_total_connections(self) -> int:
        """Get total number of active connections across all users."""
        return sum(len(conns) for conns in self._connections.values())


# Singleton instance
manager = ConnectionManager()
