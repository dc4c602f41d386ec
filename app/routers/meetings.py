"""Meeting endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.common import IdRequest, SuccessResponse
from app.schemas.meeting import (
    MeetingCreate,
    MeetingDetail,
    MeetingMinutesRequest,
    MeetingRead,
    MeetingResponseUpdate,
    MeetingUpdate,
)
from app.services import meeting_service

router = APIRouter(prefix="/meetings", tags=["Meetings"])


@router.post(
    "/create",
    response_model=MeetingRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_meeting(
    body: MeetingCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return meeting_service.create_meeting(db, user.id, body)


@router.get("/mine", response_model=list[MeetingRead])
def my_meetings(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Meetings I organize or was invited to."""
    return meeting_service.get_user_meetings(db, user.id)


@router.get("/get", response_model=MeetingDetail)
def get_meeting(
    id: UUID = Query(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meeting, participants = meeting_service.get_meeting_detail(db, id, user)
    return {"meeting": meeting, "participants": participants}


@router.post(
    "/update-response",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_response(
    body: MeetingResponseUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meeting_service.update_response(db, body.meeting_id, user.id, body.response_status)
    return SuccessResponse()


@router.post(
    "/update",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_meeting(
    body: MeetingUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meeting_service.update_meeting(db, user, body)
    return SuccessResponse()


@router.post(
    "/add-minutes",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def add_minutes(
    body: MeetingMinutesRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meeting_service.add_minutes(db, user, body)
    return SuccessResponse()


@router.post(
    "/delete",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_meeting(
    body: IdRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meeting_service.delete_meeting(db, user, body.id)
    return SuccessResponse()
