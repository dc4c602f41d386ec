"""Admin employee management and employee documents."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.constants import EMPLOYEE_DOCUMENT_TITLES
from app.core.errors import conflict, not_found
from app.core.security import hash_password
from app.db.enums import DocumentType, UserRole
from app.db.models import EmployeeDocument, User
from app.schemas.employee import EmployeeCreate, EmployeeDocumentUrls, EmployeeUpdate

logger = logging.getLogger(__name__)

DUPLICATE_EMPLOYEE = "Employee ID or email already exists"

# Form field -> document type
_DOCUMENT_FIELDS = {
    "cnic_front_url": DocumentType.ID_PROOF_FRONT,
    "cnic_back_url": DocumentType.ID_PROOF_BACK,
    "offer_letter_url": DocumentType.OFFER_LETTER,
}


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.name.asc()).all()


def list_active_users(db: Session) -> list[User]:
    """Directory used by chat and meeting pickers."""
    return db.query(User).filter(User.is_active.is_(True)).order_by(User.name.asc()).all()


def upsert_document(
    db: Session,
    user_id: UUID,
    document_type: DocumentType,
    title: str,
    document_url: str,
    uploaded_by: UUID,
) -> EmployeeDocument:
    """One document per (user, type); a new upload replaces the previous URL."""
    document = db.query(EmployeeDocument).filter(
        EmployeeDocument.user_id == user_id,
        EmployeeDocument.document_type == document_type.value,
    ).first()
    if document:
        document.title = title
        document.document_url = document_url
        document.uploaded_by = uploaded_by
    else:
        document = EmployeeDocument(
            user_id=user_id,
            document_type=document_type.value,
            title=title,
            document_url=document_url,
            uploaded_by=uploaded_by,
        )
        db.add(document)
    return document


def _attach_documents(
    db: Session,
    user_id: UUID,
    urls: EmployeeDocumentUrls,
    uploaded_by: UUID,
) -> None:
    for field, document_type in _DOCUMENT_FIELDS.items():
        url = getattr(urls, field)
        if url:
            upsert_document(
                db,
                user_id=user_id,
                document_type=document_type,
                title=EMPLOYEE_DOCUMENT_TITLES[document_type.value],
                document_url=url,
                uploaded_by=uploaded_by,
            )


def create_employee(db: Session, admin_id: UUID, data: EmployeeCreate) -> User:
    """Create an employee account plus any attached documents."""
    user = User(
        name=data.name,
        email=str(data.email).lower(),
        employee_id=data.employee_id.strip(),
        password_hash=hash_password(data.password),
        role=UserRole.USER.value,
        department=data.department,
        position=data.position,
    )
    db.add(user)
    try:
        db.flush()
        _attach_documents(db, user.id, data, admin_id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict(DUPLICATE_EMPLOYEE)
    db.refresh(user)
    logger.info("Employee created employee_id=%s by admin_id=%s", user.employee_id, admin_id)
    return user


def update_employee(db: Session, admin_id: UUID, data: EmployeeUpdate) -> User:
    user = db.get(User, data.id)
    if not user:
        raise not_found("Employee not found")

    if data.name is not None:
        user.name = data.name
    if data.email is not None:
        user.email = str(data.email).lower()
    if data.employee_id is not None:
        user.employee_id = data.employee_id.strip()
    if data.department is not None:
        user.department = data.department
    if data.position is not None:
        user.position = data.position
    if data.password:
        user.password_hash = hash_password(data.password)
        # Existing sessions end when an admin resets the password
        user.token_version += 1

    try:
        _attach_documents(db, user.id, data, admin_id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict(DUPLICATE_EMPLOYEE)
    db.refresh(user)
    return user


def list_documents(db: Session, user_id: UUID) -> list[EmployeeDocument]:
    if not db.get(User, user_id):
        raise not_found("Employee not found")
    return db.query(EmployeeDocument).filter(
        EmployeeDocument.user_id == user_id,
    ).order_by(EmployeeDocument.document_type.asc()).all()
