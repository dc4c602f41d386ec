"""Form submission endpoints (employee side)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.common import SuccessResponse
from app.schemas.forms import FormRead, FormSubmit
from app.services import form_service

router = APIRouter(prefix="/forms", tags=["Forms"])


@router.post(
    "/submit",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def submit(
    body: FormSubmit,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    form_service.submit_form(db, user.id, body)
    return SuccessResponse()


@router.get("/mine", response_model=list[FormRead])
def my_forms(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return form_service.list_user_forms(db, user.id)
