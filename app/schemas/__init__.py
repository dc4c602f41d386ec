"""Pydantic schemas for API request/response models."""

from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UpdateAvatarRequest,
    UserRead,
    UserSummary,
    VerifyTwoFactorRequest,
)
from app.schemas.common import IdRequest, SuccessResponse

__all__ = [
    # Auth
    "ChangePasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "UpdateAvatarRequest",
    "UserRead",
    "UserSummary",
    "VerifyTwoFactorRequest",
    # Common
    "IdRequest",
    "SuccessResponse",
]
