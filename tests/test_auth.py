"""
Unit tests for session tokens and password hashing
"""

from datetime import timedelta
import uuid
from jose import jwt

from resto_console.core.auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from resto_console.core.config import get_settings

from tests.conftest import PASSWORD_DIGEST

settings = get_settings()


def test_create_access_token():
    """Token carries the user, tenant and role claims"""
    user_id = uuid.uuid4()

    token = create_access_token(
        user_id=user_id,
        api_key="acme_1234",
        role="Admin",
        expires_delta=timedelta(hours=1)
    )

    assert isinstance(token, str)
    payload = decode_access_token(token)
    assert payload["sub"] == str(user_id)
    assert payload["api_key"] == "acme_1234"
    assert payload["role"] == "Admin"
    assert "exp" in payload
    assert "iat" in payload


def test_decode_expired_token():
    token = create_access_token(
        user_id=uuid.uuid4(),
        api_key="acme_1234",
        role="Staff",
        expires_delta=timedelta(seconds=-1)
    )

    assert decode_access_token(token) is None


def test_decode_token_signed_with_other_secret():
    token = jwt.encode({"sub": "someone", "api_key": "acme_1234"}, "not-the-secret", algorithm="HS256")

    assert decode_access_token(token) is None


def test_decode_garbage_token():
    assert decode_access_token("not.a.token") is None


def test_password_hash_round_trip():
    hashed = hash_password(PASSWORD_DIGEST)

    assert hashed != PASSWORD_DIGEST
    assert verify_password(PASSWORD_DIGEST, hashed)
    assert not verify_password("0" * 40, hashed)


def test_verify_password_without_hash():
    assert not verify_password(PASSWORD_DIGEST, None)
    assert not verify_password("", hash_password(PASSWORD_DIGEST))
