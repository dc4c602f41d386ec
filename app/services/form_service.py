"""Employee form submissions (resignation, grievance, feedback...)."""

from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.errors import not_found
from app.db.enums import FormStatus
from app.db.models import FormSubmission
from app.schemas.forms import FormStatusUpdate, FormSubmit


def submit_form(db: Session, user_id: UUID, data: FormSubmit) -> FormSubmission:
    form = FormSubmission(
        user_id=user_id,
        form_type=data.form_type.value,
        subject=data.subject,
        content=data.content,
        priority=data.priority.value,
        status=FormStatus.SUBMITTED.value,
    )
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def list_user_forms(db: Session, user_id: UUID) -> list[FormSubmission]:
    return db.query(FormSubmission).filter(
        FormSubmission.user_id == user_id,
    ).order_by(FormSubmission.created_at.desc()).all()


def list_all_forms(db: Session) -> list[FormSubmission]:
    return db.query(FormSubmission).options(
        joinedload(FormSubmission.user),
    ).order_by(FormSubmission.created_at.desc()).all()


def update_form_status(
    db: Session,
    responder_id: UUID,
    data: FormStatusUpdate,
) -> FormSubmission:
    form = db.get(FormSubmission, data.id)
    if not form:
        raise not_found("Form submission not found")
    form.status = data.status.value
    form.responded_by = responder_id
    if data.response:
        form.response = data.response
    db.commit()
    db.refresh(form)
    return form
