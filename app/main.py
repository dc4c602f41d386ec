"""FastAPI application entry point."""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import ErrorCode, code_for_status
from app.core.structured_logging import build_log_context, format_log_context
from app.db.session import database

logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from app.core.rate_limit import limiter


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    database.dispose()


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="HRMS API",
    description="Employee time tracking, leave, chat, projects and scheduling API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
    expose_headers=["X-Request-ID"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.perf_counter()
    response = await call_next(request)
    context = build_log_context(
        user_id=getattr(request.state, "user_id", None),
        request_id=request_id,
        route=request.url.path,
        method=request.method,
        status_code=response.status_code,
        duration_ms=(time.perf_counter() - start) * 1000,
    )
    logger.info("request %s", format_log_context(context))
    response.headers["X-Request-ID"] = request_id
    return response


# ============================================================================
# Error envelope: {"detail": ..., "code": ...}
# ============================================================================

def _error_response(status_code: int, code: ErrorCode, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code.value},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = getattr(exc, "code", None) or code_for_status(exc.status_code)
    response = _error_response(exc.status_code, code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(str(err.get("type", "")).startswith("uuid") for err in errors):
        detail = "Invalid id"
    elif errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        detail = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        detail = "Invalid request"
    return _error_response(400, ErrorCode.BAD_REQUEST, detail)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity error on %s: %s", request.url.path, exc.orig)
    return _error_response(409, ErrorCode.CONFLICT, "Conflicting record already exists")


# ============================================================================
# Routers
# ============================================================================

from app.routers import (
    admin,
    auth,
    calendar,
    chat,
    dashboard,
    employees,
    forms,
    leaves,
    meetings,
    notifications,
    projects,
    time_tracking,
    uploads,
)
from app.routers import websocket as ws_router

app.include_router(auth.router)
app.include_router(time_tracking.router)
app.include_router(leaves.router)
app.include_router(forms.router)
app.include_router(chat.router)
app.include_router(dashboard.router)
app.include_router(projects.router)
app.include_router(notifications.router)
app.include_router(employees.router)
app.include_router(admin.router)
app.include_router(meetings.router)
app.include_router(calendar.router)
app.include_router(uploads.router)

# WebSocket for real-time chat and notification pushes
app.include_router(ws_router.router)

# Stored uploads are served as static files
Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
@limiter.exempt
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    database.ping()
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
