"""Pydantic schemas for personal calendar events."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import CalendarEventType
from app.schemas.meeting import MeetingRead


class CalendarEventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    start_time: datetime
    end_time: datetime | None = None
    event_type: CalendarEventType
    is_all_day: bool = False


class CalendarEventUpdate(BaseModel):
    id: UUID
    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    start_time: datetime | None = None
    end_time: datetime | None = None
    event_type: CalendarEventType | None = None
    is_all_day: bool | None = None


class CalendarEventRead(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str | None
    event_type: CalendarEventType
    start_time: datetime
    end_time: datetime | None
    is_all_day: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CalendarRange(BaseModel):
    events: list[CalendarEventRead]
    meetings: list[MeetingRead]
