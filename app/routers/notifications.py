"""
Notifications Router - /notifications endpoints.

Provides notification listing, read status, deletion and admin creation.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_admin, require_csrf_header
from app.core.errors import not_found
from app.db.models import User
from app.schemas.common import SuccessResponse
from app.schemas.notification import (
    NotificationCreate,
    NotificationIdRequest,
    NotificationRead,
)
from app.services import notification_service


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/all", response_model=list[NotificationRead])
def list_notifications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get user's notifications, newest first."""
    return notification_service.get_notifications(db, user.id)


@router.get("/unread-count", response_model=int)
def unread_count(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_service.get_unread_count(db, user.id)


@router.post(
    "/mark-as-read",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_as_read(
    body: NotificationIdRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not notification_service.mark_read(db, body.notification_id, user.id):
        raise not_found("Notification not found")
    return SuccessResponse()


@router.post(
    "/mark-all-as-read",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_all_as_read(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification_service.mark_all_read(db, user.id)
    return SuccessResponse()


@router.post(
    "/delete",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def delete_notification(
    body: NotificationIdRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not notification_service.delete_notification(db, body.notification_id, user.id):
        raise not_found("Notification not found")
    return SuccessResponse()


@router.post(
    "/create",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def create_notification(
    body: NotificationCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a notification for any user (admin only)."""
    if not db.get(User, body.user_id):
        raise not_found("User not found")
    notification_service.create_notification(
        db,
        user_id=body.user_id,
        type=body.type,
        title=body.title,
        message=body.message,
        priority=body.priority,
        related_id=body.related_id,
        related_type=body.related_type,
    )
    return SuccessResponse()
