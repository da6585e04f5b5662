"""Unit tests for access tokens."""

import uuid
from datetime import timedelta

import pytest
from jose import jwt as jose_jwt

from practicum.kernel.identity.jwt import JWTManager


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


class TestJWTManager:

    def test_round_trip_carries_identity(self, jwt_manager):
        user_id = uuid.uuid4()
        token, expire, jti = jwt_manager.create_access_token(user_id, "a@example.com", "mentor")

        payload = jwt_manager.verify_access_token(token)

        assert payload is not None
        assert payload.sub == str(user_id)
        assert payload.role == "mentor"
        assert payload.jti == jti

    def test_expired_token_is_rejected(self, jwt_manager):
        token, _, _ = jwt_manager.create_access_token(
            uuid.uuid4(), "a@example.com", "student", expires_delta=timedelta(seconds=-1)
        )

        assert jwt_manager.verify_access_token(token) is None

    def test_wrong_secret_is_rejected(self, jwt_manager):
        token, _, _ = jwt_manager.create_access_token(uuid.uuid4(), "a@example.com", "student")
        other = JWTManager(secret_key="another-secret", algorithm="HS256", access_token_expire_minutes=30)

        assert other.verify_access_token(token) is None

    def test_non_access_token_is_rejected(self, jwt_manager):
        token = jose_jwt.encode(
            {"sub": str(uuid.uuid4()), "type": "refresh"},
            "test-secret-key-for-testing-only",
            algorithm="HS256",
        )

        assert jwt_manager.verify_access_token(token) is None
