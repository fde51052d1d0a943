"""Shared fixtures for the API test suite."""

import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest


# Settings are cached on first use, so the environment must be set before
# anything imports the application.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault(
    "LOG_DIR", str(Path(tempfile.gettempdir()) / "coursehub-test-logs")
)

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from coursehub.auth.permissions import UserRole  # noqa: E402
from coursehub.auth.security import create_access_token  # noqa: E402
from coursehub.main import create_app  # noqa: E402


class FakeResult(list):
    """Stand-in for a driver ResultSet: iterable, ``one()`` and ``was_applied``."""

    def __init__(self, rows: list[Any] | None = None, was_applied: bool = True):
        super().__init__(rows or [])
        self.was_applied = was_applied

    def one(self) -> Any:
        return self[0] if self else None


@pytest.fixture
def app() -> FastAPI:
    """Fresh application without running its lifespan."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client; services are injected per test through ``app.state``."""
    return TestClient(app)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for signed access tokens."""

    def _make(role: UserRole, user_id: UUID | None = None) -> str:
        user_id = user_id or uuid4()
        return create_access_token(
            {
                "sub": str(user_id),
                "email": f"{role.value}_{user_id.hex[:8]}@test.com",
                "role": role.value,
            }
        )

    return _make


@pytest.fixture
def admin_id() -> UUID:
    return uuid4()


@pytest.fixture
def teacher_id() -> UUID:
    return uuid4()


@pytest.fixture
def student_id() -> UUID:
    return uuid4()


@pytest.fixture
def admin_headers(make_token, admin_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(UserRole.ADMIN, admin_id)}"}


@pytest.fixture
def teacher_headers(make_token, teacher_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(UserRole.TEACHER, teacher_id)}"}


@pytest.fixture
def student_headers(make_token, student_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(UserRole.USER, student_id)}"}


@pytest.fixture
def mock_session() -> Mock:
    """Mock Cassandra session with awaitable ``aexecute`` (cassandra-asyncio-driver)."""
    from cassandra.cluster import Session

    session = Mock(spec=Session)
    session.prepare = Mock(return_value=Mock())
    session.aexecute = AsyncMock(return_value=FakeResult())
    return session


@pytest.fixture
def make_result() -> type[FakeResult]:
    """``make_result([row, ...], was_applied=...)`` builds a fake ResultSet."""
    return FakeResult
