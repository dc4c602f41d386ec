"""Pydantic schemas for employee form submissions."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import FormStatus, FormType, Priority
from app.schemas.auth import UserSummary


class FormSubmit(BaseModel):
    form_type: FormType
    subject: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1, max_length=10000)
    priority: Priority = Priority.MEDIUM


class FormRead(BaseModel):
    id: UUID
    user_id: UUID
    form_type: FormType
    subject: str
    content: str
    priority: Priority
    status: FormStatus
    responded_by: UUID | None
    response: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FormWithUser(FormRead):
    user: UserSummary | None = None


class FormStatusUpdate(BaseModel):
    id: UUID
    status: FormStatus
    response: str | None = Field(None, max_length=5000)
