"""Employee dashboard: payslips, announcements, user directory."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.auth import UserSummary
from app.schemas.common import SuccessResponse
from app.schemas.dashboard import (
    AnnouncementRead,
    MarkAnnouncementReadRequest,
    PayslipRead,
)
from app.services import announcement_service, employee_service, payslip_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/payslip", response_model=PayslipRead | None)
def latest_payslip(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Most recent payslip by period, or null."""
    return payslip_service.get_latest_payslip(db, user.id)


@router.get("/payslips", response_model=list[PayslipRead])
def payslips(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return payslip_service.list_user_payslips(db, user.id)


@router.get("/announcements", response_model=list[AnnouncementRead])
def announcements(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active announcements, highest priority first."""
    return announcement_service.get_active_announcements(db)


@router.get("/announcement-read-ids", response_model=list[UUID])
def announcement_read_ids(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return announcement_service.get_read_ids(db, user.id)


@router.post(
    "/mark-announcement-read",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_announcement_read(
    body: MarkAnnouncementReadRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    announcement_service.mark_read(db, body.announcement_id, user.id)
    return SuccessResponse()


@router.get("/users", response_model=list[UserSummary])
def users(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active colleagues (for chat and meeting invites)."""
    return employee_service.list_active_users(db)
