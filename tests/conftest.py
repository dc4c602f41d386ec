"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, created fresh for each test
- Employee/admin user records with known passwords
- HTTPX AsyncClient with session cookie and CSRF header
"""
import os
import tempfile
import uuid
from typing import AsyncGenerator, Generator

# Must be set before app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "dev"
os.environ["SENTRY_DSN"] = ""
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="hrms-uploads-")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from app.main import app
from app.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from app.core.security import create_session_token, hash_password
from app.db.base import Base
from app.db.enums import UserRole
from app.db.models import User
from app.db.session import SessionLocal, engine


TEST_PASSWORD = "password123"

# bcrypt is deliberately slow; hash the shared test password once
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    The in-memory database lives on a single shared connection, so
    sessions opened by the app (e.g. the websocket handshake) see the
    same data.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(
    db: Session,
    *,
    name: str = "Test User",
    role: UserRole = UserRole.USER,
    employee_id: str | None = None,
    position: str | None = "Engineer",
    is_active: bool = True,
) -> User:
    suffix = uuid.uuid4().hex[:8]
    user = User(
        name=name,
        email=f"{suffix}@test.com",
        employee_id=employee_id or f"EMP-{suffix}",
        password_hash=_TEST_PASSWORD_HASH,
        role=role.value,
        department="Engineering",
        position=position,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def user_factory(db: Session):
    """Create extra users: user_factory(name=..., role=...)."""
    def _create(**kwargs) -> User:
        return make_user(db, **kwargs)
    return _create


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    """Regular employee account."""
    return make_user(db, name="Alice Employee")


@pytest.fixture(scope="function")
def other_user(db: Session) -> User:
    """A second employee account."""
    return make_user(db, name="Bob Employee")


@pytest.fixture(scope="function")
def test_admin(db: Session) -> User:
    """Administrator account (two-factor not yet enrolled)."""
    return make_user(db, name="Hana Admin", role=UserRole.ADMIN, position="HR Manager")


@pytest.fixture
def test_password() -> str:
    """Plain-text password shared by every fixture account."""
    return TEST_PASSWORD


# =============================================================================
# Client Fixtures
# =============================================================================

def session_cookie_for(user: User) -> dict[str, str]:
    return {COOKIE_NAME: create_session_token(user.id, user.token_version)}


def _override_db(db: Session) -> None:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient (CSRF header included)."""
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(db: Session, test_user: User) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as test_user."""
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=session_cookie_for(test_user),
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def other_client(db: Session, other_user: User) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as other_user."""
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=session_cookie_for(other_user),
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def admin_client(db: Session, test_admin: User) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient signed in as test_admin."""
    _override_db(db)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=session_cookie_for(test_admin),
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()
