"""Time tracking endpoints: clock in/out, breaks, attendance."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_TRENDS_DAYS
from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.common import SuccessResponse
from app.schemas.project import TaskWithProject
from app.schemas.time_tracking import (
    AttendanceTrendPoint,
    BreakLogRead,
    ClockOutRequest,
    ClockOutResponse,
    EndBreakResponse,
    TimeEntryRead,
)
from app.services import time_tracking_service

router = APIRouter(prefix="/time-tracking", tags=["Time Tracking"])


@router.post(
    "/clock-in",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def clock_in(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    time_tracking_service.clock_in(db, user.id)
    return SuccessResponse()


@router.post(
    "/clock-out",
    response_model=ClockOutResponse,
    dependencies=[Depends(require_csrf_header)],
)
def clock_out(
    body: ClockOutRequest | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notes = body.notes if body else None
    return time_tracking_service.clock_out(db, user.id, notes=notes)


@router.get("/active", response_model=TimeEntryRead | None)
def get_active(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The active time entry, or null."""
    return time_tracking_service.get_active_entry(db, user.id)


@router.post(
    "/start-break",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def start_break(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    time_tracking_service.start_break(db, user.id)
    return SuccessResponse()


@router.post(
    "/end-break",
    response_model=EndBreakResponse,
    dependencies=[Depends(require_csrf_header)],
)
def end_break(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return time_tracking_service.end_break(db, user.id)


@router.get("/break-logs", response_model=list[BreakLogRead])
def get_break_logs(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return time_tracking_service.get_break_logs(db, user.id)


@router.get("/attendance", response_model=list[TimeEntryRead])
def get_attendance(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return time_tracking_service.get_attendance(db, user.id, start_date, end_date)


@router.get("/completed-tasks-today", response_model=list[TaskWithProject])
def get_completed_tasks_today(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return time_tracking_service.get_completed_tasks_for_day(db, user.id)


@router.get("/trends", response_model=list[AttendanceTrendPoint])
def get_trends(
    days: int = Query(DEFAULT_TRENDS_DAYS, ge=1, le=366),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return time_tracking_service.get_attendance_trends(db, user.id, days=days)
