"""Pydantic schemas for projects, assignments and tasks."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import Priority, ProjectSource, ProjectStatus, TaskStatus
from app.schemas.auth import UserSummary


class ProjectRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    status: ProjectStatus
    priority: Priority
    source: ProjectSource
    start_date: date | None
    end_date: date | None
    created_by: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class MyProjectRead(ProjectRead):
    """Project as seen by an assignee, including their role on it."""
    role: str


class ProjectOverview(ProjectRead):
    """Admin overview row: assignee names, task count and completion %."""
    assignees: list[str] = Field(default_factory=list)
    tasks: int = 0
    progress: int = 0


class ProjectStats(BaseModel):
    total_assigned: int
    active_projects: int
    completed_tasks: int


class CustomProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    priority: Priority = Priority.MEDIUM


class AssignProjectRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    priority: Priority = Priority.MEDIUM
    employee_ids: list[UUID] = Field(..., min_length=1)


class ProjectCreatedResponse(BaseModel):
    success: bool = True
    project_id: UUID


class ProjectTaskCreate(BaseModel):
    project_id: UUID
    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    time_entry_id: UUID | None = None


class ProjectTaskUpdate(BaseModel):
    task_id: UUID
    status: TaskStatus | None = None
    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    priority: Priority | None = None


class ProjectTaskRead(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    time_entry_id: UUID | None
    title: str
    description: str | None
    status: TaskStatus
    priority: Priority
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskWithProject(ProjectTaskRead):
    project: ProjectRead | None = None


class OngoingTask(TaskWithProject):
    assignee: UserSummary | None = None


class TaskCreatedResponse(BaseModel):
    success: bool = True
    task: ProjectTaskRead
