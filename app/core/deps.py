"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator
from uuid import UUID

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import forbidden, unauthorized
from app.core.security import decode_session_token
from app.db.enums import UserRole
from app.db.models import User
from app.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "hrms_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(COOKIE_NAME)


def resolve_user_from_token(db: Session, token: str | None) -> User | None:
    """
    Resolve the user behind a session token, or None.

    Rejects expired/invalid tokens, disabled accounts and revoked
    sessions (token_version mismatch).
    """
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except jwt.InvalidTokenError:
        return None
    try:
        user_id = UUID(payload["sub"])
    except (KeyError, ValueError):
        return None

    user = db.get(User, user_id)
    if not user or not user.is_active:
        return None
    if user.token_version != payload.get("token_version"):
        return None
    return user


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User | None:
    """Current user if a valid session cookie is present, else None."""
    return resolve_user_from_token(db, get_session_token(request))


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """
    Get authenticated user from session cookie.

    Raises:
        ProcedureError UNAUTHORIZED: Authentication failed
    """
    token = get_session_token(request)
    if not token:
        raise unauthorized("Not authenticated")
    user = resolve_user_from_token(db, token)
    if not user:
        raise unauthorized("Invalid session")
    request.state.user_id = str(user.id)
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only procedures."""
    if user.role != UserRole.ADMIN.value:
        raise forbidden("Admin access required")
    return user


def require_csrf_header(request: Request) -> None:
    """
    Require the X-Requested-With header on mutations.

    Browsers won't send custom headers on cross-site form posts, so a
    missing header means the request did not come from our client.
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise forbidden("Missing CSRF header")
