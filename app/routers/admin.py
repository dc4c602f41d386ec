"""
Admin Router - /admin endpoints.

HR workflows (leave and form resolution), project assignment,
attendance dashboards, payroll and announcements. Every route
requires the admin role.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_AVERAGE_HOURS_DAYS
from app.core.deps import get_db, require_admin, require_csrf_header
from app.db.models import User
from app.schemas.attendance import DayAverage, EmployeeStatus
from app.schemas.auth import UserSummary
from app.schemas.common import IdRequest, SuccessResponse
from app.schemas.dashboard import (
    AnnouncementAdminRead,
    AnnouncementCreate,
    AnnouncementRead,
    PayslipCreate,
    PayslipRead,
    PayslipWithUser,
)
from app.schemas.forms import FormStatusUpdate, FormWithUser
from app.schemas.leave import LeaveStatusUpdate, LeaveWithUser
from app.schemas.project import (
    AssignProjectRequest,
    OngoingTask,
    ProjectCreatedResponse,
    ProjectOverview,
    ProjectRead,
    TaskWithProject,
)
from app.schemas.time_tracking import TimeEntryRead
from app.services import (
    announcement_service,
    attendance_service,
    form_service,
    leave_service,
    payslip_service,
    project_service,
)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


# =============================================================================
# Leave & Forms
# =============================================================================


@router.get("/leave-requests", response_model=list[LeaveWithUser])
def leave_requests(db: Session = Depends(get_db)):
    return leave_service.list_all_leaves(db)


@router.post(
    "/update-leave-request",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_leave_request(
    body: LeaveStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    leave_service.update_leave_status(db, admin.id, body)
    return SuccessResponse()


@router.get("/form-submissions", response_model=list[FormWithUser])
def form_submissions(db: Session = Depends(get_db)):
    return form_service.list_all_forms(db)


@router.post(
    "/update-form-submission",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_form_submission(
    body: FormStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    form_service.update_form_status(db, admin.id, body)
    return SuccessResponse()


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects-overview", response_model=list[ProjectOverview])
def projects_overview(db: Session = Depends(get_db)):
    return [
        ProjectOverview(
            **ProjectRead.model_validate(row["project"]).model_dump(),
            assignees=row["assignees"],
            tasks=row["tasks"],
            progress=row["progress"],
        )
        for row in project_service.get_projects_overview(db)
    ]


@router.post(
    "/assign-project",
    response_model=ProjectCreatedResponse,
    dependencies=[Depends(require_csrf_header)],
)
def assign_project(
    body: AssignProjectRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    project = project_service.assign_project(db, admin.id, body)
    return ProjectCreatedResponse(project_id=project.id)


@router.get("/ongoing-tasks", response_model=list[OngoingTask])
def ongoing_tasks(db: Session = Depends(get_db)):
    return [
        OngoingTask(
            **TaskWithProject.model_validate(task).model_dump(),
            assignee=UserSummary.model_validate(task.user) if task.user else None,
        )
        for task in project_service.get_ongoing_tasks(db)
    ]


# =============================================================================
# Attendance
# =============================================================================


@router.get("/employee-status", response_model=list[EmployeeStatus])
def employee_status(db: Session = Depends(get_db)):
    return attendance_service.employee_status_snapshot(db)


@router.get("/average-hours", response_model=list[DayAverage])
def average_hours(
    days: int = Query(DEFAULT_AVERAGE_HOURS_DAYS, ge=1, le=90),
    db: Session = Depends(get_db),
):
    return attendance_service.average_hours_by_day(db, days=days)


@router.get("/time-entries", response_model=list[TimeEntryRead])
def time_entries(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    db: Session = Depends(get_db),
):
    return attendance_service.get_time_entries_for_all(db, start_date, end_date)


# =============================================================================
# Payroll
# =============================================================================


@router.get("/payslips", response_model=list[PayslipWithUser])
def payslips(db: Session = Depends(get_db)):
    return payslip_service.list_all_payslips(db)


@router.post(
    "/create-payslip",
    response_model=PayslipRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_payslip(
    body: PayslipCreate,
    db: Session = Depends(get_db),
):
    return payslip_service.create_payslip(db, body)


# =============================================================================
# Announcements
# =============================================================================


@router.get("/announcements", response_model=list[AnnouncementAdminRead])
def announcements(db: Session = Depends(get_db)):
    return [
        AnnouncementAdminRead(
            **AnnouncementRead.model_validate(row["announcement"]).model_dump(),
            creator=(
                UserSummary.model_validate(row["announcement"].creator)
                if row["announcement"].creator else None
            ),
            read_count=row["read_count"],
        )
        for row in announcement_service.list_with_read_counts(db)
    ]


@router.post(
    "/create-announcement",
    response_model=AnnouncementRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_announcement(
    body: AnnouncementCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return announcement_service.create_announcement(db, admin.id, body)


@router.post(
    "/delete-announcement",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_announcement(
    body: IdRequest,
    db: Session = Depends(get_db),
):
    announcement_service.delete_announcement(db, body.id)
    return SuccessResponse()
