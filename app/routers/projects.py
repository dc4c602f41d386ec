"""Project and task endpoints (employee side)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.common import SuccessResponse
from app.schemas.project import (
    CustomProjectCreate,
    MyProjectRead,
    ProjectCreatedResponse,
    ProjectRead,
    ProjectStats,
    ProjectTaskCreate,
    ProjectTaskRead,
    ProjectTaskUpdate,
    TaskCreatedResponse,
)
from app.services import project_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("/mine", response_model=list[MyProjectRead])
def my_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        MyProjectRead(**ProjectRead.model_validate(project).model_dump(), role=role)
        for project, role in project_service.get_user_projects(db, user.id)
    ]


@router.get("/tasks", response_model=list[ProjectTaskRead])
def project_tasks(
    project_id: UUID = Query(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.get_project_tasks(db, project_id, user.id)


@router.post(
    "/create-custom-project",
    response_model=ProjectCreatedResponse,
    dependencies=[Depends(require_csrf_header)],
)
def create_custom_project(
    body: CustomProjectCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = project_service.create_custom_project(db, user.id, body)
    return ProjectCreatedResponse(project_id=project.id)


@router.post(
    "/create-task",
    response_model=TaskCreatedResponse,
    dependencies=[Depends(require_csrf_header)],
)
def create_task(
    body: ProjectTaskCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = project_service.create_task(db, user.id, body)
    return TaskCreatedResponse(task=ProjectTaskRead.model_validate(task))


@router.post(
    "/update-task",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_task(
    body: ProjectTaskUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project_service.update_task(db, user, body)
    return SuccessResponse()


@router.get("/stats", response_model=ProjectStats)
def stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return project_service.get_project_stats(db, user.id)
