"""Authentication-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.core.security import check_password_length
from app.db.enums import UserRole


class UserRead(BaseModel):
    """Public view of a user (never includes password hash or TOTP secret)."""
    id: UUID
    name: str
    email: str
    employee_id: str
    role: UserRole
    avatar: str | None = None
    department: str | None = None
    position: str | None = None
    two_factor_enabled: bool = False
    is_active: bool = True
    last_signed_in: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """Compact user reference embedded in other responses."""
    id: UUID
    name: str
    employee_id: str
    avatar: str | None = None
    department: str | None = None
    position: str | None = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    employee_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """
    Login result.

    Employees get a session cookie and `user`. Admins get
    requires_two_factor + a short-lived two_factor_token instead; on first
    enrollment the TOTP secret and otpauth URI are included once.
    """
    success: bool = True
    user: UserSummary | None = None
    requires_two_factor: bool = False
    setup_required: bool = False
    two_factor_token: str | None = None
    secret: str | None = None
    otpauth_uri: str | None = None


class VerifyTwoFactorRequest(BaseModel):
    token: str = Field(..., min_length=1)
    code: str = Field(..., min_length=4, max_length=16)


class UpdateAvatarRequest(BaseModel):
    avatar: str = Field(..., min_length=1, max_length=500)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)
