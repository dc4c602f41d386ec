"""Pydantic schemas for meetings and participants."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.db.enums import MeetingStatus, ResponseStatus
from app.db.types import as_utc
from app.schemas.auth import UserSummary


class MeetingCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    agenda: str | None = Field(None, max_length=10000)
    start_time: datetime
    end_time: datetime
    location: str | None = Field(None, max_length=500)
    meeting_link: str | None = Field(None, max_length=1000)
    participant_ids: list[UUID] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_times(self):
        if as_utc(self.end_time) < as_utc(self.start_time):
            raise ValueError("end_time cannot be before start_time")
        return self


class MeetingUpdate(BaseModel):
    id: UUID
    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    agenda: str | None = Field(None, max_length=10000)
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = Field(None, max_length=500)
    meeting_link: str | None = Field(None, max_length=1000)
    status: MeetingStatus | None = None


class MeetingRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    agenda: str | None
    start_time: datetime
    end_time: datetime
    location: str | None
    meeting_link: str | None
    organizer_id: UUID
    status: MeetingStatus
    meeting_minutes: str | None
    action_items: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ParticipantRead(BaseModel):
    id: UUID
    meeting_id: UUID
    user_id: UUID
    response_status: ResponseStatus
    user: UserSummary | None = None

    model_config = {"from_attributes": True}


class MeetingDetail(BaseModel):
    meeting: MeetingRead
    participants: list[ParticipantRead]


class MeetingResponseUpdate(BaseModel):
    meeting_id: UUID
    response_status: Literal["accepted", "declined", "tentative"]


class MeetingMinutesRequest(BaseModel):
    meeting_id: UUID
    meeting_minutes: str = Field(..., min_length=1)
    action_items: str = ""
