"""Auth service - credential checks, admin two-factor login, session issuance."""

import logging
from dataclasses import dataclass
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from app.core.errors import bad_request, unauthorized
from app.core.security import (
    TWO_FACTOR_PURPOSE,
    create_session_token,
    create_two_factor_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from app.db.enums import UserRole
from app.db.models import User
from app.db.types import utcnow
from app.services import mfa_service

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    """Outcome of a password login.

    Exactly one of session_token / two_factor_token is set.
    """
    user: User
    session_token: str | None = None
    two_factor_token: str | None = None
    setup_required: bool = False
    secret: str | None = None
    otpauth_uri: str | None = None

    @property
    def requires_two_factor(self) -> bool:
        return self.two_factor_token is not None


def get_user_by_employee_id(db: Session, employee_id: str) -> User | None:
    return db.query(User).filter(User.employee_id == employee_id).first()


def authenticate(db: Session, employee_id: str, password: str) -> User | None:
    """Return the active user matching employee id + password, else None."""
    user = get_user_by_employee_id(db, employee_id.strip())
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_session(db: Session, user: User) -> str:
    """Record the sign-in and return a fresh session token."""
    user.last_signed_in = utcnow()
    db.commit()
    return create_session_token(user.id, user.token_version)


def login(db: Session, employee_id: str, password: str) -> LoginResult:
    """
    Password login.

    Employees get a session immediately. Admins get a 10-minute
    two-factor token; on first enrollment the TOTP secret and its
    otpauth URI are returned so the client can show a QR code.
    """
    user = authenticate(db, employee_id, password)
    if not user:
        logger.info("Login failed for employee_id=%s", employee_id)
        raise unauthorized("Invalid employee ID or password")

    if user.role != UserRole.ADMIN.value:
        return LoginResult(user=user, session_token=issue_session(db, user))

    secret, setup_required = mfa_service.ensure_totp_secret(db, user)
    result = LoginResult(
        user=user,
        two_factor_token=create_two_factor_token(user.id, user.token_version),
        setup_required=setup_required,
    )
    if setup_required:
        label = user.email or user.employee_id or "admin"
        result.secret = secret
        result.otpauth_uri = mfa_service.get_totp_provisioning_uri(secret, label)
    return result


def verify_two_factor(db: Session, token: str, code: str) -> tuple[User, str]:
    """
    Exchange a two-factor token + TOTP code for a session.

    Only tokens minted with purpose=two_factor are accepted here.
    """
    try:
        payload = decode_session_token(token, expected_purpose=TWO_FACTOR_PURPOSE)
        user_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise unauthorized("Invalid or expired two-factor token")

    user = db.get(User, user_id)
    if (
        not user
        or not user.is_active
        or user.role != UserRole.ADMIN.value
        or user.token_version != payload.get("token_version")
    ):
        raise unauthorized("Unauthorized")

    if not user.two_factor_secret:
        raise unauthorized("Two-factor not configured")

    if not mfa_service.verify_totp_code(user.two_factor_secret, code):
        raise unauthorized("Invalid verification code")

    mfa_service.complete_enrollment(db, user)
    return user, issue_session(db, user)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> str:
    """Set a new password, revoke other sessions and return a fresh token."""
    if current_password == new_password:
        raise bad_request("New password must be different from current password")
    if not verify_password(current_password, user.password_hash):
        raise unauthorized("Invalid current password")
    user.password_hash = hash_password(new_password)
    user.token_version += 1
    db.commit()
    return create_session_token(user.id, user.token_version)


def update_avatar(db: Session, user: User, avatar: str) -> None:
    user.avatar = avatar
    db.commit()


def revoke_sessions(db: Session, user: User) -> None:
    """Invalidate every outstanding session token for the user."""
    user.token_version += 1
    db.commit()
