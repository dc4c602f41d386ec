"""Authentication endpoints: password login, admin two-factor, profile."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import (
    COOKIE_NAME,
    get_current_user,
    get_db,
    get_optional_user,
    require_csrf_header,
)
from app.core.rate_limit import AUTH_LIMIT, limiter
from app.db.models import User
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UpdateAvatarRequest,
    UserRead,
    UserSummary,
    VerifyTwoFactorRequest,
)
from app.schemas.common import SuccessResponse
from app.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.get("/me", response_model=UserRead | None)
def me(user: User | None = Depends(get_optional_user)):
    """Current user, or null when not signed in."""
    return user


@router.post(
    "/logout",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(COOKIE_NAME, path="/")
    return SuccessResponse()


@router.post(
    "/login",
    response_model=LoginResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Log in with employee ID + password.

    Employees receive the session cookie directly. Admins receive a
    two-factor challenge and must call verify-two-factor.
    """
    result = auth_service.login(db, body.employee_id, body.password)

    if result.requires_two_factor:
        return LoginResponse(
            requires_two_factor=True,
            setup_required=result.setup_required,
            two_factor_token=result.two_factor_token,
            secret=result.secret,
            otpauth_uri=result.otpauth_uri,
        )

    _set_session_cookie(response, result.session_token)
    logger.info("Login success user_id=%s", result.user.id)
    return LoginResponse(user=UserSummary.model_validate(result.user))


@router.post(
    "/verify-two-factor",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(AUTH_LIMIT)
def verify_two_factor(
    request: Request,
    body: VerifyTwoFactorRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Exchange the two-factor token and a TOTP code for a session cookie."""
    user, token = auth_service.verify_two_factor(db, body.token, body.code)
    _set_session_cookie(response, token)
    logger.info("Two-factor login success user_id=%s", user.id)
    return SuccessResponse()


@router.post(
    "/update-avatar",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def update_avatar(
    body: UpdateAvatarRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.update_avatar(db, user, body.avatar)
    return SuccessResponse()


@router.post(
    "/change-password",
    response_model=SuccessResponse,
    dependencies=[Depends(require_csrf_header)],
)
def change_password(
    body: ChangePasswordRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    token = auth_service.change_password(db, user, body.current_password, body.new_password)
    _set_session_cookie(response, token)
    return SuccessResponse()
