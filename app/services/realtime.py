"""
Realtime event fan-out over the WebSocket connection manager.

Pushes are best-effort: a failure is logged and never fails the
request that triggered it.
"""

import logging
from uuid import UUID

from app.core.async_utils import run_async
from app.core.websocket import manager

logger = logging.getLogger(__name__)

CHAT_NEW = "chat:new"
NOTIFICATIONS_NEW = "notifications:new"

PUSH_TIMEOUT_SECONDS = 5


def emit_chat_message(sender_id: UUID, recipient_id: UUID | None, message_id: UUID) -> None:
    """Notify sender and recipient, or everyone for a broadcast."""
    payload = {
        "type": CHAT_NEW,
        "data": {
            "message_id": str(message_id),
            "sender_id": str(sender_id),
            "recipient_id": str(recipient_id) if recipient_id else None,
        },
    }
    try:
        if recipient_id is None:
            run_async(manager.broadcast(payload), timeout=PUSH_TIMEOUT_SECONDS)
        else:
            run_async(
                manager.send_to_users([sender_id, recipient_id], payload),
                timeout=PUSH_TIMEOUT_SECONDS,
            )
    except Exception as exc:
        logger.warning("chat push failed message_id=%s: %s", message_id, exc)


def emit_notification(user_id: UUID, notification_id: UUID | None = None) -> None:
    """Tell the owner's clients to refresh notifications."""
    payload = {
        "type": NOTIFICATIONS_NEW,
        "data": {
            "user_id": str(user_id),
            "notification_id": str(notification_id) if notification_id else None,
        },
    }
    try:
        run_async(manager.send_to_user(user_id, payload), timeout=PUSH_TIMEOUT_SECONDS)
    except Exception as exc:
        logger.warning("notification push failed user_id=%s: %s", user_id, exc)
