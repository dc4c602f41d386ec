"""Pydantic schemas for payslips and announcements."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import Priority
from app.schemas.auth import UserSummary


# =============================================================================
# Payslips
# =============================================================================

class PayslipRead(BaseModel):
    id: UUID
    user_id: UUID
    month: int
    year: int
    basic_salary: float
    allowances: float
    deductions: float
    net_salary: float
    working_days: int
    present_days: int
    paid_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PayslipWithUser(PayslipRead):
    user: UserSummary | None = None


class PayslipCreate(BaseModel):
    """Admin payroll snapshot. net_salary defaults to basic + allowances - deductions."""
    user_id: UUID
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    basic_salary: float = Field(..., ge=0)
    allowances: float = Field(0, ge=0)
    deductions: float = Field(0, ge=0)
    net_salary: float | None = None
    working_days: int = Field(..., ge=0, le=31)
    present_days: int = Field(..., ge=0, le=31)
    paid_at: datetime | None = None


# =============================================================================
# Announcements
# =============================================================================

class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1, max_length=10000)
    priority: Priority = Priority.MEDIUM
    expires_at: datetime | None = None


class AnnouncementRead(BaseModel):
    id: UUID
    title: str
    content: str
    priority: Priority
    is_active: bool
    created_by: UUID | None
    expires_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AnnouncementAdminRead(AnnouncementRead):
    creator: UserSummary | None = None
    read_count: int = 0


class MarkAnnouncementReadRequest(BaseModel):
    announcement_id: UUID
