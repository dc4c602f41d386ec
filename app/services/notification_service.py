"""
Notification Service - handles in-app notifications.

Provides CRUD for notifications and trigger functions for HR events
(project assignment, leave resolution, announcements).
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.enums import NotificationType, Priority, UserRole
from app.db.models import Notification, User
from app.services import realtime

logger = logging.getLogger(__name__)


# =============================================================================
# Notification CRUD
# =============================================================================


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    priority: Priority = Priority.MEDIUM,
    related_id: UUID | None = None,
    related_type: str | None = None,
    push: bool = True,
) -> Notification:
    """Create a notification and push notifications:new to the owner."""
    notification = Notification(
        user_id=user_id,
        type=NotificationType(type).value,
        title=title,
        message=message,
        priority=Priority(priority).value,
        related_id=related_id,
        related_type=related_type,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    if push:
        realtime.emit_notification(user_id, notification.id)
    return notification


def get_notifications(db: Session, user_id: UUID) -> list[Notification]:
    """All notifications for a user, newest first."""
    return db.query(Notification).filter(
        Notification.user_id == user_id,
    ).order_by(Notification.created_at.desc()).all()


def get_unread_count(db: Session, user_id: UUID) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> bool:
    """Mark one of the user's notifications read. Returns False if not theirs."""
    updated = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return updated > 0


def mark_all_read(db: Session, user_id: UUID) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update({Notification.is_read: True}, synchronize_session=False)
    db.commit()
    return updated


def delete_notification(db: Session, notification_id: UUID, user_id: UUID) -> bool:
    deleted = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


# =============================================================================
# Trigger Functions (best-effort)
# =============================================================================


def _notify_safely(db: Session, **kwargs) -> None:
    """Create a notification, logging instead of raising on failure."""
    try:
        create_notification(db, **kwargs)
    except Exception as exc:
        db.rollback()
        logger.warning(
            "notification fan-out failed type=%s user_id=%s: %s",
            kwargs.get("type"), kwargs.get("user_id"), exc,
        )


def notify_project_assigned(
    db: Session,
    project_id: UUID,
    project_name: str,
    user_ids: list[UUID],
) -> None:
    for user_id in user_ids:
        _notify_safely(
            db,
            user_id=user_id,
            type=NotificationType.PROJECT_ASSIGNED,
            title="New project assigned",
            message=f"You have been assigned to {project_name}",
            related_id=project_id,
            related_type="project",
        )


def notify_leave_resolved(
    db: Session,
    leave_id: UUID,
    user_id: UUID,
    approved: bool,
    rejection_reason: str | None = None,
) -> None:
    if approved:
        type_ = NotificationType.LEAVE_APPROVED
        title = "Leave approved"
        message = "Your leave application has been approved"
    else:
        type_ = NotificationType.LEAVE_REJECTED
        title = "Leave rejected"
        message = f"Your leave application was rejected: {rejection_reason or 'Rejected'}"
    _notify_safely(
        db,
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        related_id=leave_id,
        related_type="leave",
    )


def notify_announcement(
    db: Session,
    announcement_id: UUID,
    title: str,
    priority: Priority,
    exclude_user_id: UUID | None = None,
) -> None:
    """Fan an announcement out to every active employee."""
    recipients = db.query(User.id).filter(
        User.is_active.is_(True),
        User.role == UserRole.USER.value,
    ).all()
    for (user_id,) in recipients:
        if user_id == exclude_user_id:
            continue
        _notify_safely(
            db,
            user_id=user_id,
            type=NotificationType.ANNOUNCEMENT,
            title="New announcement",
            message=title,
            priority=priority,
            related_id=announcement_id,
            related_type="announcement",
        )
