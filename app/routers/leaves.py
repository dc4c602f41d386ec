"""Leave application endpoints (employee side)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.common import SuccessResponse
from app.schemas.leave import LeaveRead, LeaveSubmit
from app.services import leave_service

router = APIRouter(prefix="/leaves", tags=["Leaves"])


@router.post(
    "/submit",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def submit(
    body: LeaveSubmit,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    leave_service.submit_leave(db, user.id, body)
    return SuccessResponse()


@router.get("/mine", response_model=list[LeaveRead])
def my_leaves(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return leave_service.list_user_leaves(db, user.id)
