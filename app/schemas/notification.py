"""Pydantic schemas for in-app notifications."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import NotificationType, Priority


class NotificationRead(BaseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    priority: Priority
    is_read: bool
    related_id: UUID | None
    related_type: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationCreate(BaseModel):
    user_id: UUID
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=500)
    message: str = Field(..., min_length=1, max_length=5000)
    priority: Priority = Priority.MEDIUM
    related_id: UUID | None = None
    related_type: str | None = Field(None, max_length=50)


class NotificationIdRequest(BaseModel):
    notification_id: UUID
