"""
WebSocket router for the live notification channel.

Provides a WebSocket endpoint that:
1. Authenticates users via JWT (query param or session cookie)
2. Maintains persistent connections
3. Receives notification, unread-count and invalidation pushes
"""

from uuid import UUID

import anyio
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from practice_api.core.deps import COOKIE_NAME, resolve_token_user
from practice_api.core.websocket import manager
from practice_api.db.session import SessionLocal

router = APIRouter(prefix="/ws", tags=["WebSocket"])


def _user_id_from(token: str) -> UUID | None:
    """Active, unrevoked user for a token (None if disabled or revoked)."""
    db = SessionLocal()
    try:
        user = resolve_token_user(db, token)
        return user.id if user else None
    finally:
        db.close()


@router.websocket("/notifications")
async def websocket_notifications(
    websocket: WebSocket,
    token: str | None = Query(None),
):
    """
    WebSocket endpoint for live updates.

    Authenticates via:
    1. JWT token in query parameter (?token=...)
    2. Or session cookie (for browser clients)

    The user must be active and the token's version current, same as REST.

    Once connected, the server pushes:
    - notifications (type: 'notification')
    - unread counts (type: 'count_update')
    - cache invalidations (type: 'invalidate')
    """
    user_id = None

    # Try token from query param first
    if token:
        user_id = await anyio.to_thread.run_sync(_user_id_from, token)
        if not user_id:
            await websocket.close(code=4001, reason="Invalid token")
            return

    # Fall back to cookie if no token param
    if not user_id:
        cookie = websocket.cookies.get(COOKIE_NAME)
        if cookie:
            user_id = await anyio.to_thread.run_sync(_user_id_from, cookie)

    if not user_id:
        await websocket.close(code=4001, reason="Authentication required")
        return

    await manager.connect(websocket, user_id)

    try:
        # Keep connection alive, handle incoming messages (heartbeat/pings)
        while True:
            try:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_text("pong")
            except WebSocketDisconnect:
                break
    finally:
        await manager.disconnect(websocket, user_id)
