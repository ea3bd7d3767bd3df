from __future__ import annotations

from datetime import timedelta

import pytest

from obravista.auth.jwt import create_access_token, decode_jwt, encode_jwt, read_access_token
from obravista.core.enums import UserType
from obravista.core.exceptions import AuthenticationError


def test_access_token_roundtrip_contains_identity():
    token = create_access_token(user_id=10, email="ana@obra.test", user_type=UserType.ADMIN, secret="test-secret")
    claims = read_access_token(token, secret="test-secret")
    assert (claims.user_id, claims.email, claims.type) == (10, "ana@obra.test", UserType.ADMIN)

    raw = decode_jwt(token, secret="test-secret")
    assert raw["sub"] == "10"
    assert raw["type"] == "admin"
    assert "exp" in raw


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token(user_id=1, email="a@b.c", user_type="usuario", secret="one")
    with pytest.raises(AuthenticationError):
        read_access_token(token, secret="two")


def test_expired_token_is_rejected():
    token = encode_jwt({"sub": "1"}, secret="s", ttl=timedelta(minutes=-5))
    with pytest.raises(AuthenticationError, match="expired"):
        read_access_token(token, secret="s")


def test_token_without_subject_is_rejected():
    token = encode_jwt({"email": "x@y.z"}, secret="s", ttl=timedelta(minutes=5))
    with pytest.raises(AuthenticationError):
        read_access_token(token, secret="s")
