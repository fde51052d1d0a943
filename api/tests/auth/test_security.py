"""Tests for auth security functions."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import JWTError, jwt

from coursehub.auth.permissions import UserRole
from coursehub.auth.security import create_access_token, decode_access_token
from coursehub.config.settings import get_settings


class TestAccessToken:
    """Tests for access token creation and decoding."""

    def test_create_access_token(self) -> None:
        """Should create valid access token."""
        user_id = uuid4()
        data = {
            "sub": str(user_id),
            "email": "test@example.com",
            "role": UserRole.USER.value,
        }
        token = create_access_token(data)
        assert token is not None
        assert len(token) > 0

    def test_create_does_not_mutate_input(self) -> None:
        data = {"sub": str(uuid4()), "role": UserRole.USER.value}
        create_access_token(data)
        assert set(data) == {"sub", "role"}

    def test_decode_access_token(self) -> None:
        """Should decode token and return payload."""
        user_id = uuid4()
        email = "test@example.com"
        role = UserRole.TEACHER

        data = {"sub": str(user_id), "email": email, "role": role.value}
        token = create_access_token(data)
        payload = decode_access_token(token)

        assert payload["sub"] == str(user_id)
        assert payload["email"] == email
        assert payload["role"] == role.value
        assert payload["type"] == "access"
        assert "exp" in payload
        assert "iat" in payload

    def test_decode_access_token_expired(self) -> None:
        """Should raise JWTError for expired token."""
        data = {
            "sub": str(uuid4()),
            "email": "test@example.com",
            "role": UserRole.USER.value,
        }
        token = create_access_token(data, expires_delta=timedelta(seconds=-1))

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_decode_access_token_invalid(self) -> None:
        """Should raise JWTError for invalid token."""
        with pytest.raises(JWTError):
            decode_access_token("invalid.token.here")

    def test_decode_access_token_wrong_type(self) -> None:
        """Should raise JWTError if token type is not 'access'."""
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "user", "type": "refresh"},
            settings.auth_secret_key,
            algorithm=settings.auth_algorithm,
        )

        with pytest.raises(JWTError, match="expected 'access'"):
            decode_access_token(token)

    def test_decode_access_token_wrong_signature(self) -> None:
        """Tokens signed with another key are rejected."""
        settings = get_settings()
        token = jwt.encode(
            {"sub": str(uuid4()), "role": "user", "type": "access"},
            "another-secret-key-that-is-long-enough!!",
            algorithm=settings.auth_algorithm,
        )

        with pytest.raises(JWTError):
            decode_access_token(token)

    @pytest.mark.parametrize("missing", ["sub", "role"])
    def test_decode_access_token_missing_claims(self, missing: str) -> None:
        """Tokens without identity claims are rejected."""
        data = {"sub": str(uuid4()), "role": UserRole.USER.value}
        del data[missing]
        token = create_access_token(data)

        with pytest.raises(JWTError, match=missing):
            decode_access_token(token)
