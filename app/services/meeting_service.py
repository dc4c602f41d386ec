"""Meetings: organizer-owned scheduling with per-participant RSVPs."""

import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.errors import bad_request, forbidden, not_found
from app.db.enums import MeetingStatus, ResponseStatus, UserRole
from app.db.models import Meeting, MeetingParticipant, User
from app.db.types import as_utc
from app.schemas.meeting import MeetingCreate, MeetingMinutesRequest, MeetingUpdate

logger = logging.getLogger(__name__)


def _is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN.value


def get_meeting_or_404(db: Session, meeting_id: UUID) -> Meeting:
    meeting = db.get(Meeting, meeting_id)
    if not meeting:
        raise not_found("Meeting not found")
    return meeting


def _require_organizer(meeting: Meeting, user: User) -> None:
    if meeting.organizer_id != user.id and not _is_admin(user):
        raise forbidden("Only the organizer can modify this meeting")


def create_meeting(db: Session, organizer_id: UUID, data: MeetingCreate) -> Meeting:
    participant_ids = [
        uid for uid in dict.fromkeys(data.participant_ids) if uid != organizer_id
    ]
    if participant_ids:
        found = {row.id for row in db.query(User.id).filter(User.id.in_(participant_ids))}
        if len(found) != len(participant_ids):
            raise bad_request("Participant not found")

    meeting = Meeting(
        title=data.title,
        description=data.description,
        agenda=data.agenda,
        start_time=data.start_time,
        end_time=data.end_time,
        location=data.location,
        meeting_link=data.meeting_link,
        organizer_id=organizer_id,
        status=MeetingStatus.SCHEDULED.value,
    )
    meeting.participants = [
        MeetingParticipant(user_id=uid, response_status=ResponseStatus.PENDING.value)
        for uid in participant_ids
    ]
    db.add(meeting)
    db.commit()
    db.refresh(meeting)
    logger.info("Meeting %s created with %d participants", meeting.id, len(participant_ids))
    return meeting


def get_user_meetings(db: Session, user_id: UUID) -> list[Meeting]:
    """Meetings the user organizes or attends, newest first."""
    participant_meeting_ids = db.query(MeetingParticipant.meeting_id).filter(
        MeetingParticipant.user_id == user_id,
    )
    return db.query(Meeting).filter(
        or_(
            Meeting.organizer_id == user_id,
            Meeting.id.in_(participant_meeting_ids),
        )
    ).order_by(Meeting.created_at.desc()).all()


def get_meeting_detail(db: Session, meeting_id: UUID, user: User) -> tuple[Meeting, list[MeetingParticipant]]:
    """Meeting plus participants; visible to participants, the organizer and admins."""
    meeting = get_meeting_or_404(db, meeting_id)
    participants = db.query(MeetingParticipant).options(
        joinedload(MeetingParticipant.user),
    ).filter(
        MeetingParticipant.meeting_id == meeting_id,
    ).all()

    is_participant = any(p.user_id == user.id for p in participants)
    if meeting.organizer_id != user.id and not is_participant and not _is_admin(user):
        raise forbidden("Not invited to this meeting")
    return meeting, participants


def update_response(
    db: Session,
    meeting_id: UUID,
    user_id: UUID,
    response_status: str,
) -> MeetingParticipant:
    """Change the caller's own RSVP."""
    participant = db.query(MeetingParticipant).filter(
        MeetingParticipant.meeting_id == meeting_id,
        MeetingParticipant.user_id == user_id,
    ).first()
    if not participant:
        raise not_found("Not a participant of this meeting")
    participant.response_status = ResponseStatus(response_status).value
    db.commit()
    db.refresh(participant)
    return participant


def update_meeting(db: Session, user: User, data: MeetingUpdate) -> Meeting:
    meeting = get_meeting_or_404(db, data.id)
    _require_organizer(meeting, user)

    updates = data.model_dump(exclude_unset=True, exclude={"id"})
    if "status" in updates and updates["status"] is not None:
        updates["status"] = MeetingStatus(updates["status"]).value
    for field, value in updates.items():
        if value is None and field in ("title", "start_time", "end_time", "status"):
            continue
        setattr(meeting, field, value)

    if as_utc(meeting.end_time) < as_utc(meeting.start_time):
        db.rollback()
        raise bad_request("end_time cannot be before start_time")
    db.commit()
    db.refresh(meeting)
    return meeting


def add_minutes(db: Session, user: User, data: MeetingMinutesRequest) -> Meeting:
    """Record minutes and action items; the meeting is marked completed."""
    meeting = get_meeting_or_404(db, data.meeting_id)
    _require_organizer(meeting, user)
    meeting.meeting_minutes = data.meeting_minutes
    meeting.action_items = data.action_items
    meeting.status = MeetingStatus.COMPLETED.value
    db.commit()
    db.refresh(meeting)
    return meeting


def delete_meeting(db: Session, user: User, meeting_id: UUID) -> None:
    """Delete a meeting; participants cascade with it."""
    meeting = get_meeting_or_404(db, meeting_id)
    _require_organizer(meeting, user)
    db.delete(meeting)
    db.commit()
    logger.info("Meeting %s deleted by %s", meeting_id, user.id)
