"""Chat endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_CHAT_LIMIT, MAX_CHAT_LIMIT
from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.chat import ChatMessageRead, ChatSend, MarkReadRequest
from app.schemas.common import SuccessResponse
from app.services import chat_service

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "/send",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def send(
    body: ChatSend,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    chat_service.send_message(db, user.id, body.message, body.recipient_id)
    return SuccessResponse()


@router.get("/messages", response_model=list[ChatMessageRead])
def messages(
    limit: int = Query(DEFAULT_CHAT_LIMIT, ge=1, le=MAX_CHAT_LIMIT),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return chat_service.get_messages(db, user.id, limit=limit)


@router.post(
    "/mark-read",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_read(
    body: MarkReadRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    chat_service.mark_read(db, body.message_id, user.id)
    return SuccessResponse()
