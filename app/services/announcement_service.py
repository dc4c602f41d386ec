"""Announcements: priority ranking, read tracking, admin management."""

import logging
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.constants import PRIORITY_RANK
from app.core.errors import not_found
from app.db.models import Announcement, AnnouncementRead
from app.db.types import utcnow
from app.schemas.dashboard import AnnouncementCreate
from app.services import notification_service

logger = logging.getLogger(__name__)


def rank_announcements(announcements: list[Announcement]) -> list[Announcement]:
    """
    Sort by priority rank descending, then created_at descending.

    Unknown priorities rank 0. Python's sort is stable, so exact ties
    keep their incoming order.
    """
    return sorted(
        announcements,
        key=lambda a: (PRIORITY_RANK.get(a.priority, 0), a.created_at),
        reverse=True,
    )


def get_active_announcements(db: Session) -> list[Announcement]:
    """Active, unexpired announcements in ranked order."""
    now = utcnow()
    announcements = db.query(Announcement).filter(
        Announcement.is_active.is_(True),
        or_(Announcement.expires_at.is_(None), Announcement.expires_at > now),
    ).order_by(Announcement.created_at.desc()).all()
    return rank_announcements(announcements)


def get_read_ids(db: Session, user_id: UUID) -> list[UUID]:
    return [
        row.announcement_id
        for row in db.query(AnnouncementRead.announcement_id).filter(
            AnnouncementRead.user_id == user_id,
        )
    ]


def mark_read(db: Session, announcement_id: UUID, user_id: UUID) -> None:
    """Idempotent read receipt."""
    if not db.get(Announcement, announcement_id):
        raise not_found("Announcement not found")
    exists = db.query(AnnouncementRead).filter(
        AnnouncementRead.announcement_id == announcement_id,
        AnnouncementRead.user_id == user_id,
    ).first()
    if exists:
        return
    db.add(AnnouncementRead(announcement_id=announcement_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # Concurrent duplicate; the unique constraint already holds the row
        db.rollback()


def list_with_read_counts(db: Session) -> list[dict]:
    """Admin view: every announcement with creator and read count, newest first."""
    announcements = db.query(Announcement).options(
        joinedload(Announcement.creator),
    ).order_by(Announcement.created_at.desc()).all()

    counts = dict(
        db.query(AnnouncementRead.announcement_id, func.count(AnnouncementRead.id))
        .group_by(AnnouncementRead.announcement_id)
        .all()
    )
    return [
        {"announcement": a, "read_count": counts.get(a.id, 0)}
        for a in announcements
    ]


def create_announcement(
    db: Session,
    created_by: UUID,
    data: AnnouncementCreate,
) -> Announcement:
    announcement = Announcement(
        title=data.title,
        content=data.content,
        priority=data.priority.value,
        created_by=created_by,
        expires_at=data.expires_at,
        is_active=True,
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)

    notification_service.notify_announcement(
        db,
        announcement_id=announcement.id,
        title=announcement.title,
        priority=data.priority,
        exclude_user_id=created_by,
    )
    return announcement


def delete_announcement(db: Session, announcement_id: UUID) -> None:
    """Delete an announcement together with its read receipts."""
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise not_found("Announcement not found")
    # reads cascade via the relationship (delete-orphan)
    db.delete(announcement)
    db.commit()
    logger.info("Announcement %s deleted", announcement_id)
