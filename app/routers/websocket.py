"""
WebSocket router for real-time events.

Provides a WebSocket endpoint that:
1. Authenticates users via session cookie or ?token=
2. Maintains persistent connections
3. Receives chat:new and notifications:new pushes
"""

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from app.core.deps import COOKIE_NAME, resolve_user_from_token
from app.core.websocket import manager
from app.db.session import SessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])


def _authenticate(token: str | None):
    db = SessionLocal()
    try:
        user = resolve_user_from_token(db, token)
        return user.id if user else None
    finally:
        db.close()


@router.websocket("/events")
async def websocket_events(
    websocket: WebSocket,
    token: str | None = Query(None),
):
    """
    WebSocket endpoint for real-time events.

    Authenticates via the ?token= query parameter, falling back to the
    session cookie. Clients may send "ping" and receive "pong".
    """
    user_id = await run_in_threadpool(
        _authenticate, token or websocket.cookies.get(COOKIE_NAME)
    )
    if not user_id:
        await websocket.close(code=4001, reason="Authentication required")
        return

    await manager.connect(websocket, user_id)
    logger.debug("websocket connected user_id=%s", user_id)

    try:
        while True:
            try:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_text("pong")
            except WebSocketDisconnect:
                break
    finally:
        await manager.disconnect(websocket, user_id)
