"""Leave applications: employee submission and admin resolution."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.errors import not_found
from app.db.enums import LeaveStatus
from app.db.models import LeaveApplication
from app.db.types import utcnow
from app.schemas.leave import LeaveStatusUpdate, LeaveSubmit
from app.services import notification_service

logger = logging.getLogger(__name__)


def submit_leave(db: Session, user_id: UUID, data: LeaveSubmit) -> LeaveApplication:
    leave = LeaveApplication(
        user_id=user_id,
        leave_type=data.leave_type.value,
        start_date=data.start_date,
        end_date=data.end_date,
        reason=data.reason,
        status=LeaveStatus.PENDING.value,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    return leave


def list_user_leaves(db: Session, user_id: UUID) -> list[LeaveApplication]:
    return db.query(LeaveApplication).filter(
        LeaveApplication.user_id == user_id,
    ).order_by(LeaveApplication.created_at.desc()).all()


def list_all_leaves(db: Session) -> list[LeaveApplication]:
    """All applications with their applicant, newest first."""
    return db.query(LeaveApplication).options(
        joinedload(LeaveApplication.user),
    ).order_by(LeaveApplication.created_at.desc()).all()


def update_leave_status(
    db: Session,
    approver_id: UUID,
    data: LeaveStatusUpdate,
) -> LeaveApplication:
    """
    Resolve a leave application.

    approved_at is stamped only on approval; a rejection always carries a
    reason (defaults to "Rejected"). The applicant is notified best-effort.
    """
    leave = db.get(LeaveApplication, data.id)
    if not leave:
        raise not_found("Leave application not found")

    leave.status = data.status.value
    leave.approved_by = approver_id
    if data.status == LeaveStatus.APPROVED:
        leave.approved_at = utcnow()
        leave.rejection_reason = None
    elif data.status == LeaveStatus.REJECTED:
        leave.approved_at = None
        leave.rejection_reason = data.rejection_reason or "Rejected"
    else:
        leave.approved_at = None
        leave.rejection_reason = None
    db.commit()
    db.refresh(leave)

    logger.info("Leave %s set to %s by %s", leave.id, leave.status, approver_id)
    if data.status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        notification_service.notify_leave_resolved(
            db,
            leave_id=leave.id,
            user_id=leave.user_id,
            approved=data.status == LeaveStatus.APPROVED,
            rejection_reason=leave.rejection_reason,
        )
    return leave
