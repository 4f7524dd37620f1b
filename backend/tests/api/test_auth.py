"""
Tests for JWT authentication dependency.
"""

import os
from datetime import datetime, timezone, timedelta
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from jose import jwt

from api.middleware.auth import decode_token, get_current_user
from fastapi.security import HTTPAuthorizationCredentials

# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    audience: str = "authenticated",
    secret: str = TEST_JWT_SECRET,
) -> str:
    """Create a test JWT token."""
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "session_id": "session-1",
        "aud": audience,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestDecodeToken:

    @patch("api.middleware.auth.get_settings")
    def test_valid_token(self, mock_settings):
        """Valid token should decode successfully."""
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        payload = decode_token(create_test_token())
        assert payload.sub == "test-user-123"
        assert payload.email == "test@example.com"

    @patch("api.middleware.auth.get_settings")
    def test_expired_token(self, mock_settings):
        """Expired token should raise AuthError."""
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        with pytest.raises(HTTPException) as exc_info:
            decode_token(create_test_token(expired=True))
        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    @patch("api.middleware.auth.get_settings")
    def test_invalid_token(self, mock_settings):
        """Invalid token should raise AuthError."""
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        with pytest.raises(HTTPException) as exc_info:
            decode_token("invalid-token")
        assert "Invalid token" in exc_info.value.detail

    @patch("api.middleware.auth.get_settings")
    def test_wrong_secret(self, mock_settings):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        with pytest.raises(HTTPException):
            decode_token(create_test_token(secret="not-the-secret"))

    @patch("api.middleware.auth.get_settings")
    def test_wrong_audience(self, mock_settings):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        with pytest.raises(HTTPException):
            decode_token(create_test_token(audience="anon"))

    @patch("api.middleware.auth.get_settings")
    def test_missing_jwt_secret(self, mock_settings):
        """Missing JWT secret should be reported as not configured."""
        mock_settings.return_value.supabase_jwt_secret = ""
        with pytest.raises(HTTPException) as exc_info:
            decode_token(create_test_token())
        assert "not configured" in exc_info.value.detail.lower()


class TestGetCurrentUser:

    @pytest.mark.asyncio
    @patch("api.middleware.auth.get_settings")
    async def test_only_required_claims(self, mock_settings):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode(
            {"sub": "user-3", "aud": "authenticated", "exp": int(exp.timestamp())},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )

        user = await get_current_user(bearer(token))

        assert user.id == "user-3"
        assert user.email == ""
        assert user.session_id is None

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(None)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    @patch("api.middleware.auth.get_settings")
    async def test_builds_user_from_claims(self, mock_settings):
        mock_settings.return_value.supabase_jwt_secret = TEST_JWT_SECRET
        user = await get_current_user(bearer(create_test_token(user_id="user-9")))
        assert user.id == "user-9"
        assert user.email == "test@example.com"
        assert user.role == "authenticated"
        assert user.session_id == "session-1"


# Integration test that uses real JWT secret from environment
@pytest.mark.skipif(
    not os.environ.get("SUPABASE_JWT_SECRET"),
    reason="SUPABASE_JWT_SECRET not set"
)
class TestAuthIntegration:
    """Integration tests using the real Supabase JWT secret from environment."""

    def test_real_jwt_secret_decodes_valid_token(self):
        token = create_test_token(secret=os.environ["SUPABASE_JWT_SECRET"])
        assert decode_token(token).sub == "test-user-123"

    def test_real_jwt_secret_rejects_wrong_secret(self):
        token = create_test_token(secret="this-is-not-the-real-secret")
        with pytest.raises(HTTPException):
            decode_token(token)
