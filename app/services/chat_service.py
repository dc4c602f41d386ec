"""Chat: direct and broadcast messages."""

from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.constants import DEFAULT_CHAT_LIMIT, MAX_CHAT_LIMIT
from app.core.errors import bad_request, forbidden, not_found
from app.db.models import ChatMessage, User
from app.services import realtime


def send_message(
    db: Session,
    sender_id: UUID,
    message: str,
    recipient_id: UUID | None = None,
) -> ChatMessage:
    """Store a message and push chat:new (recipient_id None = broadcast)."""
    if recipient_id is not None and not db.get(User, recipient_id):
        raise bad_request("Recipient not found")

    chat = ChatMessage(sender_id=sender_id, recipient_id=recipient_id, message=message)
    db.add(chat)
    db.commit()
    db.refresh(chat)

    realtime.emit_chat_message(sender_id, recipient_id, chat.id)
    return chat


def get_messages(
    db: Session,
    user_id: UUID,
    limit: int = DEFAULT_CHAT_LIMIT,
) -> list[ChatMessage]:
    """Messages the user sent, received, or that were broadcast; newest first."""
    limit = max(1, min(limit, MAX_CHAT_LIMIT))
    return db.query(ChatMessage).options(
        joinedload(ChatMessage.sender),
    ).filter(
        or_(
            ChatMessage.sender_id == user_id,
            ChatMessage.recipient_id == user_id,
            ChatMessage.recipient_id.is_(None),
        )
    ).order_by(ChatMessage.created_at.desc()).limit(limit).all()


def mark_read(db: Session, message_id: UUID, user_id: UUID) -> None:
    """Mark a message read. Only its recipient (or anyone, for broadcasts) may."""
    chat = db.get(ChatMessage, message_id)
    if not chat:
        raise not_found("Message not found")
    if chat.recipient_id is not None and chat.recipient_id != user_id:
        raise forbidden("Not the recipient of this message")
    chat.is_read = True
    db.commit()
