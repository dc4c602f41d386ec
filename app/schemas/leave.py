"""Pydantic schemas for leave applications."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.db.enums import LeaveStatus, LeaveType
from app.schemas.auth import UserSummary


class LeaveSubmit(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=5000)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveRead(BaseModel):
    id: UUID
    user_id: UUID
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    approved_by: UUID | None
    approved_at: datetime | None
    rejection_reason: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LeaveWithUser(LeaveRead):
    user: UserSummary | None = None


class LeaveStatusUpdate(BaseModel):
    id: UUID
    status: LeaveStatus
    rejection_reason: str | None = Field(None, max_length=2000)
