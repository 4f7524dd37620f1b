"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timezone, timedelta
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import MagicMock

import jwt  # PyJWT
import pytest

from shared.config import get_settings
from shared.database import reset_client_cache


# Test JWT secret (only for testing - matches api/test_auth.py)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
) -> str:
    """
    Create a test JWT token shaped like a Supabase access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "session_id": "test-session",
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


class FakeQuery:
    """
    Chainable stand-in for a postgrest query builder.

    Every builder call (select, eq, order, insert, ...) is recorded and
    returns the same object; ``execute`` returns ``data`` or raises ``error``.
    """

    def __init__(self, data: Any = None, error: Optional[Exception] = None):
        self.data = data
        self.error = error
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def builder(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return builder

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        """Arguments of every recorded call to ``name``."""
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    async def execute(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


def make_db(
    tables: Optional[dict[str, FakeQuery]] = None,
    rpcs: Optional[dict[str, FakeQuery]] = None,
) -> MagicMock:
    """Supabase client mock routing ``table(name)`` and ``rpc(name)`` to fake queries."""
    tables = tables or {}
    rpcs = rpcs or {}
    db = MagicMock()
    db.table.side_effect = lambda name: tables.setdefault(name, FakeQuery([]))
    db.rpc.side_effect = lambda name, params=None: rpcs.setdefault(name, FakeQuery([]))
    return db


@pytest.fixture
def fake_query():
    """Factory for FakeQuery objects."""
    return FakeQuery


@pytest.fixture
def fake_db():
    """Factory for Supabase client mocks (see make_db)."""
    return make_db


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset cached settings and database clients around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    yield
    get_settings.cache_clear()
    reset_client_cache()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
