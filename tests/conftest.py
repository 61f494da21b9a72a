"""Pytest configuration and shared fixtures."""

import os

# Must be set before mocktest.core.config is imported anywhere
os.environ.setdefault("ENV", "test")
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")

from collections.abc import Generator  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from mocktest.core.dependencies import CurrentUser, UserRole  # noqa: E402
from mocktest.core.rate_limit import RateLimitResult, get_rate_limiter  # noqa: E402
from mocktest.db.base import Base  # noqa: E402
from mocktest.db.engine import engine  # noqa: E402
from mocktest.db.session import SessionLocal, get_db  # noqa: E402
from mocktest.main import app  # noqa: E402
from tests.helpers.seed import auth_headers  # noqa: E402


class InMemoryRateLimiter:
    """RateLimiter stand-in keeping counters in a dict, one per test."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def check(self, scope: str, identifier: str, limit: int, window_seconds: int) -> RateLimitResult:
        key = f"{scope}:{identifier}"
        self.counts[key] = self.counts.get(key, 0) + 1
        count = self.counts[key]
        if count > limit:
            return RateLimitResult(allowed=False, remaining=0, reset_at=0, retry_after=window_seconds)
        return RateLimitResult(allowed=True, remaining=limit - count, reset_at=0, retry_after=0)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema on the in-memory SQLite database for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def rate_limiter() -> InMemoryRateLimiter:
    return InMemoryRateLimiter()


@pytest.fixture
def client(db, rate_limiter) -> Generator[TestClient, None, None]:
    """FastAPI test client with database and rate limiter overrides."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _principal(role: UserRole, name: str) -> CurrentUser:
    return CurrentUser(id=uuid4(), role=role, name=name)


@pytest.fixture
def student() -> CurrentUser:
    return _principal(UserRole.STUDENT, "Test Student")


@pytest.fixture
def other_student() -> CurrentUser:
    return _principal(UserRole.STUDENT, "Other Student")


@pytest.fixture
def admin() -> CurrentUser:
    return _principal(UserRole.ADMIN, "Test Admin")


@pytest.fixture
def student_headers(student) -> dict[str, str]:
    return auth_headers(student)


@pytest.fixture
def other_student_headers(other_student) -> dict[str, str]:
    return auth_headers(other_student)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_headers(admin)
