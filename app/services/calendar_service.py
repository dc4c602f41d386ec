"""Personal calendar events and the combined date-range view."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import bad_request, forbidden, not_found
from app.db.models import CalendarEvent, Meeting, MeetingParticipant
from app.db.types import as_utc
from app.schemas.calendar import CalendarEventCreate, CalendarEventUpdate


def _get_owned_event(db: Session, event_id: UUID, user_id: UUID) -> CalendarEvent:
    event = db.get(CalendarEvent, event_id)
    if not event:
        raise not_found("Event not found")
    if event.user_id != user_id:
        raise forbidden("Not allowed to modify this event")
    return event


def create_event(db: Session, user_id: UUID, data: CalendarEventCreate) -> CalendarEvent:
    if data.end_time is not None and as_utc(data.end_time) < as_utc(data.start_time):
        raise bad_request("end_time cannot be before start_time")
    event = CalendarEvent(
        user_id=user_id,
        title=data.title,
        description=data.description,
        event_type=data.event_type.value,
        start_time=data.start_time,
        end_time=data.end_time,
        is_all_day=data.is_all_day,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def get_user_events(db: Session, user_id: UUID) -> list[CalendarEvent]:
    return db.query(CalendarEvent).filter(
        CalendarEvent.user_id == user_id,
    ).order_by(CalendarEvent.start_time.desc()).all()


def get_range(
    db: Session,
    user_id: UUID,
    start_date: datetime,
    end_date: datetime,
) -> dict:
    """
    The caller's events plus the meetings they organize or attend,
    both starting inside [start_date, end_date], ascending by start.
    """
    start, end = as_utc(start_date), as_utc(end_date)
    if end < start:
        raise bad_request("end_date must be after start_date")

    events = db.query(CalendarEvent).filter(
        CalendarEvent.user_id == user_id,
        CalendarEvent.start_time >= start,
        CalendarEvent.start_time <= end,
    ).order_by(CalendarEvent.start_time.asc()).all()

    attending = db.query(MeetingParticipant.meeting_id).filter(
        MeetingParticipant.user_id == user_id,
    )
    meetings = db.query(Meeting).filter(
        Meeting.start_time >= start,
        Meeting.start_time <= end,
        or_(Meeting.organizer_id == user_id, Meeting.id.in_(attending)),
    ).order_by(Meeting.start_time.asc()).all()

    return {"events": events, "meetings": meetings}


def update_event(db: Session, user_id: UUID, data: CalendarEventUpdate) -> CalendarEvent:
    event = _get_owned_event(db, data.id, user_id)
    updates = data.model_dump(exclude_unset=True, exclude={"id"})
    for field, value in updates.items():
        if value is None and field in ("title", "start_time", "event_type", "is_all_day"):
            continue
        if field == "event_type":
            value = value.value if hasattr(value, "value") else value
        setattr(event, field, value)

    if event.end_time is not None and as_utc(event.end_time) < as_utc(event.start_time):
        db.rollback()
        raise bad_request("end_time cannot be before start_time")
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, user_id: UUID, event_id: UUID) -> None:
    event = _get_owned_event(db, event_id, user_id)
    db.delete(event)
    db.commit()
