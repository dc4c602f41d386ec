"""Calendar endpoints: personal events and the combined range view."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_csrf_header
from app.db.models import User
from app.schemas.calendar import (
    CalendarEventCreate,
    CalendarEventRead,
    CalendarEventUpdate,
    CalendarRange,
)
from app.schemas.common import IdRequest, SuccessResponse
from app.services import calendar_service

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.post(
    "/create-event",
    response_model=CalendarEventRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_event(
    body: CalendarEventCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return calendar_service.create_event(db, user.id, body)


@router.get("/my-events", response_model=list[CalendarEventRead])
def my_events(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return calendar_service.get_user_events(db, user.id)


@router.get("/events-by-range", response_model=CalendarRange)
def events_by_range(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return calendar_service.get_range(db, user.id, start_date, end_date)


@router.post(
    "/update-event",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_event(
    body: CalendarEventUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    calendar_service.update_event(db, user.id, body)
    return SuccessResponse()


@router.post(
    "/delete-event",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_event(
    body: IdRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    calendar_service.delete_event(db, user.id, body.id)
    return SuccessResponse()
