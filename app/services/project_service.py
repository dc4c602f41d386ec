"""Projects, assignments and tasks."""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.errors import bad_request, forbidden, not_found
from app.db.enums import (
    DEFAULT_PROJECT_ROLE, ProjectSource, ProjectStatus, TaskStatus, UserRole,
)
from app.db.models import Project, ProjectAssignment, ProjectTask, TimeEntry, User
from app.db.types import utcnow
from app.schemas.project import (
    AssignProjectRequest,
    CustomProjectCreate,
    ProjectTaskCreate,
    ProjectTaskUpdate,
)
from app.services import notification_service
from app.utils.rounding import round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# Employee Views
# =============================================================================


def get_user_projects(db: Session, user_id: UUID) -> list[tuple[Project, str]]:
    """Projects the user is assigned to, paired with their role on each."""
    return db.query(Project, ProjectAssignment.role).join(
        ProjectAssignment, ProjectAssignment.project_id == Project.id,
    ).filter(
        ProjectAssignment.user_id == user_id,
    ).order_by(Project.created_at.desc()).all()


def get_project_tasks(db: Session, project_id: UUID, user_id: UUID) -> list[ProjectTask]:
    """The user's own tasks on a project."""
    return db.query(ProjectTask).filter(
        ProjectTask.project_id == project_id,
        ProjectTask.user_id == user_id,
    ).order_by(ProjectTask.created_at.desc()).all()


def get_project_stats(db: Session, user_id: UUID) -> dict:
    total_assigned = db.query(ProjectAssignment).filter(
        ProjectAssignment.user_id == user_id,
    ).count()
    active_projects = db.query(Project).join(
        ProjectAssignment, ProjectAssignment.project_id == Project.id,
    ).filter(
        ProjectAssignment.user_id == user_id,
        Project.status == ProjectStatus.ACTIVE.value,
    ).count()
    completed_tasks = db.query(ProjectTask).filter(
        ProjectTask.user_id == user_id,
        ProjectTask.status == TaskStatus.COMPLETED.value,
    ).count()
    return {
        "total_assigned": total_assigned,
        "active_projects": active_projects,
        "completed_tasks": completed_tasks,
    }


# =============================================================================
# Project Creation
# =============================================================================


def _create_project(
    db: Session,
    *,
    name: str,
    description: str | None,
    priority: str,
    source: ProjectSource,
    created_by: UUID,
    assignee_ids: list[UUID],
) -> Project:
    project = Project(
        name=name,
        description=description,
        priority=priority,
        status=ProjectStatus.ACTIVE.value,
        source=source.value,
        created_by=created_by,
    )
    db.add(project)
    db.flush()
    for user_id in dict.fromkeys(assignee_ids):
        db.add(ProjectAssignment(
            project_id=project.id,
            user_id=user_id,
            role=DEFAULT_PROJECT_ROLE,
        ))
    db.commit()
    db.refresh(project)
    return project


def create_custom_project(db: Session, user_id: UUID, data: CustomProjectCreate) -> Project:
    """Employee-created project; the creator is auto-assigned."""
    return _create_project(
        db,
        name=data.name,
        description=data.description,
        priority=data.priority.value,
        source=ProjectSource.EMPLOYEE,
        created_by=user_id,
        assignee_ids=[user_id],
    )


def assign_project(db: Session, admin_id: UUID, data: AssignProjectRequest) -> Project:
    """Team-lead project assigned to one or more employees, who are notified."""
    employee_ids = list(dict.fromkeys(data.employee_ids))
    found = {
        row.id for row in db.query(User.id).filter(User.id.in_(employee_ids))
    }
    missing = [str(uid) for uid in employee_ids if uid not in found]
    if missing:
        raise bad_request(f"Employee not found: {', '.join(missing)}")

    project = _create_project(
        db,
        name=data.name,
        description=data.description,
        priority=data.priority.value,
        source=ProjectSource.TEAM_LEAD,
        created_by=admin_id,
        assignee_ids=employee_ids,
    )
    logger.info("Project %s assigned to %d employees", project.id, len(employee_ids))
    notification_service.notify_project_assigned(db, project.id, project.name, employee_ids)
    return project


# =============================================================================
# Tasks
# =============================================================================


def create_task(db: Session, user_id: UUID, data: ProjectTaskCreate) -> ProjectTask:
    if not db.get(Project, data.project_id):
        raise not_found("Project not found")
    if data.time_entry_id is not None:
        entry = db.get(TimeEntry, data.time_entry_id)
        if not entry or entry.user_id != user_id:
            raise bad_request("Time entry not found")

    task = ProjectTask(
        project_id=data.project_id,
        user_id=user_id,
        time_entry_id=data.time_entry_id,
        title=data.title,
        description=data.description,
        priority=data.priority.value,
        status=data.status.value,
        completed_at=utcnow() if data.status == TaskStatus.COMPLETED else None,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, user: User, data: ProjectTaskUpdate) -> ProjectTask:
    """Update a task. Only its owner or an admin may."""
    task = db.get(ProjectTask, data.task_id)
    if not task:
        raise not_found("Task not found")
    if task.user_id != user.id and user.role != UserRole.ADMIN.value:
        raise forbidden("Not allowed to update this task")

    if data.title is not None:
        task.title = data.title
    if data.description is not None:
        task.description = data.description
    if data.priority is not None:
        task.priority = data.priority.value
    if data.status is not None:
        task.status = data.status.value
        if data.status == TaskStatus.COMPLETED:
            task.completed_at = utcnow()
    db.commit()
    db.refresh(task)
    return task


# =============================================================================
# Admin Views
# =============================================================================


def get_projects_overview(db: Session) -> list[dict]:
    """Every project with assignee names, task count and completion %."""
    projects = db.query(Project).options(
        joinedload(Project.assignments).joinedload(ProjectAssignment.user),
    ).order_by(Project.created_at.desc()).all()

    task_counts: dict[UUID, list[int]] = {}
    rows = db.query(
        ProjectTask.project_id, ProjectTask.status, func.count(ProjectTask.id),
    ).group_by(ProjectTask.project_id, ProjectTask.status).all()
    for project_id, status, count in rows:
        totals = task_counts.setdefault(project_id, [0, 0])
        totals[0] += count
        if status == TaskStatus.COMPLETED.value:
            totals[1] += count

    overview = []
    for project in projects:
        total, completed = task_counts.get(project.id, [0, 0])
        assignees = [
            a.user.name or a.user.employee_id or "Employee"
            for a in project.assignments
            if a.user is not None
        ]
        overview.append({
            "project": project,
            "assignees": assignees,
            "tasks": total,
            "progress": int(round_half_up(completed / total * 100, 0)) if total else 0,
        })
    return overview


def get_ongoing_tasks(db: Session) -> list[ProjectTask]:
    """Tasks not yet completed, with assignee and project, newest first."""
    return db.query(ProjectTask).options(
        joinedload(ProjectTask.user),
        joinedload(ProjectTask.project),
    ).filter(
        ProjectTask.status != TaskStatus.COMPLETED.value,
    ).order_by(ProjectTask.created_at.desc()).all()
