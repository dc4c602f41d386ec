"""Security utilities for JWT session tokens and password hashing."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from app.core.config import settings


SESSION_PURPOSE = "session"
TWO_FACTOR_PURPOSE = "two_factor"

# bcrypt only reads the first 72 bytes and newer releases reject longer input
MAX_PASSWORD_BYTES = 72


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token(
    user_id: UUID,
    token_version: int,
    purpose: str = SESSION_PURPOSE,
    expires_in: timedelta | None = None,
) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET).
    The purpose claim keeps short-lived two-factor challenge tokens
    from being usable as sessions (and vice versa).
    """
    if expires_in is None:
        expires_in = timedelta(days=settings.SESSION_MAX_AGE_DAYS)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "purpose": purpose,
        "token_version": token_version,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def create_two_factor_token(user_id: UUID, token_version: int) -> str:
    """Short-lived token that only authorizes the TOTP verification step."""
    return create_session_token(
        user_id,
        token_version,
        purpose=TWO_FACTOR_PURPOSE,
        expires_in=timedelta(minutes=settings.TWO_FACTOR_TOKEN_MINUTES),
    )


def decode_session_token(token: str, expected_purpose: str = SESSION_PURPOSE) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets or the
            purpose claim does not match.
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            payload = jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
        if not payload.get("sub"):
            raise jwt.InvalidTokenError("Invalid session payload")
        if payload.get("purpose", SESSION_PURPOSE) != expected_purpose:
            raise jwt.InvalidTokenError("Invalid session purpose")
        return payload
    raise last_error  # type: ignore


# =============================================================================
# Passwords
# =============================================================================

def check_password_length(password: str | None) -> str | None:
    """Pydantic validator body: reject passwords bcrypt cannot hash."""
    if password is not None and len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (cost 10)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=10)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
