"""Rate limiting configuration for the HRMS API."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")


def build_default_limits(per_minute: int, testing: bool = False) -> list[str]:
    """Global per-client limit applied by SlowAPIMiddleware (0 disables it)."""
    if testing or per_minute <= 0:
        return []
    return [f"{per_minute}/minute"]


DEFAULT_LIMITS = build_default_limits(settings.RATE_LIMIT_API, testing=IS_TESTING)

# Single-process deployment: counters live in memory
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    default_limits=DEFAULT_LIMITS,
    enabled=not IS_TESTING,
)

AUTH_LIMIT = f"{settings.RATE_LIMIT_AUTH}/minute"
