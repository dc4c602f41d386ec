"""MFA service - TOTP enrollment and verification for admin logins.

Provides:
- TOTP secret generation and provisioning URIs (pyotp)
- Code verification with one step of clock-drift tolerance
- Enrollment state on the User row
"""

import pyotp
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.models import User


# =============================================================================
# TOTP Functions
# =============================================================================


def generate_totp_secret() -> str:
    """Generate a random base32 TOTP secret (32 characters)."""
    return pyotp.random_base32()


def get_totp_provisioning_uri(secret: str, label: str) -> str:
    """
    Generate the otpauth:// URI for authenticator apps.

    Clients render it as a QR code for Google Authenticator, Authy, etc.
    """
    totp = pyotp.TOTP(secret)
    return totp.provisioning_uri(name=label, issuer_name=settings.MFA_ISSUER)


def verify_totp_code(secret: str | None, code: str) -> bool:
    """
    Verify a 6-digit TOTP code.

    Allows 1 time step tolerance (±30 seconds) for clock drift.
    """
    if not secret or not code:
        return False

    # Sanitize input
    code = "".join(code.split()).replace("-", "")
    if len(code) != 6 or not code.isdigit():
        return False

    totp = pyotp.TOTP(secret)
    return totp.verify(code, valid_window=1)


# =============================================================================
# Enrollment State
# =============================================================================


def ensure_totp_secret(db: Session, user: User) -> tuple[str, bool]:
    """
    Return the user's TOTP secret, provisioning one if missing.

    Returns (secret, setup_required). Setup is required until the first
    successful verification flips two_factor_enabled.
    """
    setup_required = not user.two_factor_enabled
    if not user.two_factor_secret:
        user.two_factor_secret = generate_totp_secret()
        user.two_factor_enabled = False
        db.commit()
        setup_required = True
    return user.two_factor_secret, setup_required


def complete_enrollment(db: Session, user: User) -> None:
    """Mark TOTP as enabled after the first verified code."""
    if not user.two_factor_enabled:
        user.two_factor_enabled = True
        db.commit()


def reset_two_factor(db: Session, user: User) -> None:
    """
    Clear TOTP enrollment; the next login provisions a fresh secret.

    Outstanding sessions and two-factor tokens are revoked.
    """
    user.two_factor_secret = None
    user.two_factor_enabled = False
    user.token_version += 1
    db.commit()
