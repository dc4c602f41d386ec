"""Pydantic schemas for time entries, breaks and attendance."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import TimeEntryStatus


class TimeEntryRead(BaseModel):
    id: UUID
    user_id: UUID
    time_in: datetime
    time_out: datetime | None
    total_hours: float | None
    status: TimeEntryStatus
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class BreakLogRead(BaseModel):
    id: UUID
    time_entry_id: UUID
    user_id: UUID
    break_start: datetime
    break_end: datetime | None
    duration: int | None  # minutes

    model_config = {"from_attributes": True}


class ClockOutRequest(BaseModel):
    notes: str | None = Field(None, max_length=2000)


class ClockOutResponse(BaseModel):
    success: bool = True
    total_hours: float
    status: TimeEntryStatus


class EndBreakResponse(BaseModel):
    success: bool = True
    duration: int


class AttendanceTrendPoint(BaseModel):
    """One closed entry in the trailing trends window."""
    date: str  # YYYY-MM-DD (UTC)
    hours: float
    time_in: datetime
    time_out: datetime | None
