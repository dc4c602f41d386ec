"""Employee management endpoints (admin only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_admin, require_csrf_header
from app.db.models import User
from app.schemas.auth import UserRead
from app.schemas.employee import EmployeeCreate, EmployeeDocumentRead, EmployeeUpdate
from app.services import employee_service

router = APIRouter(prefix="/employees", tags=["Employees"])


@router.get("/list", response_model=list[UserRead])
def list_employees(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return employee_service.list_users(db)


@router.post(
    "/create",
    response_model=UserRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_employee(
    body: EmployeeCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return employee_service.create_employee(db, admin.id, body)


@router.post(
    "/update",
    response_model=UserRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_employee(
    body: EmployeeUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return employee_service.update_employee(db, admin.id, body)


@router.get("/documents", response_model=list[EmployeeDocumentRead])
def employee_documents(
    user_id: UUID = Query(...),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return employee_service.list_documents(db, user_id)
