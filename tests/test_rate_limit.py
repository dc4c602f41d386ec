import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.core import rate_limit
from app.main import app


def test_build_default_limits():
    assert rate_limit.build_default_limits(120) == ["120/minute"]
    assert rate_limit.build_default_limits(0) == []
    assert rate_limit.build_default_limits(120, testing=True) == []


def test_default_limits_disabled_under_testing():
    assert rate_limit.DEFAULT_LIMITS == []
    assert rate_limit.limiter.enabled is False


def test_app_installs_slowapi_middleware():
    assert any(m.cls is SlowAPIMiddleware for m in app.user_middleware)
    assert app.state.limiter is rate_limit.limiter


@pytest.mark.asyncio
async def test_default_limit_applies_to_undecorated_routes():
    limiter = Limiter(
        key_func=get_remote_address,
        storage_uri="memory://",
        default_limits=rate_limit.build_default_limits(2),
    )
    mini = FastAPI()
    mini.state.limiter = limiter
    mini.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    mini.add_middleware(SlowAPIMiddleware)

    @mini.get("/ping")
    def ping():
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=mini), base_url="http://test") as c:
        statuses = [(await c.get("/ping")).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
