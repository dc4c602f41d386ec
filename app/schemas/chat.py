"""Pydantic schemas for chat messages."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.auth import UserSummary


class ChatSend(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    recipient_id: UUID | None = None  # None = broadcast to everyone


class ChatMessageRead(BaseModel):
    id: UUID
    sender_id: UUID
    recipient_id: UUID | None
    message: str
    is_read: bool
    created_at: datetime
    sender: UserSummary | None = None

    model_config = {"from_attributes": True}


class MarkReadRequest(BaseModel):
    message_id: UUID
