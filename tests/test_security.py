from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.domain.exceptions import (
    ConfigurationError,
    EmptyPasswordError,
    TokenExpiredError,
    TokenInvalidError,
    WrongTokenTypeError,
)
from app.infrastructure.security.password_hasher import PasswordHasher
from app.infrastructure.security.token_service import JwtTokenService


def _token_service(**overrides) -> JwtTokenService:
    values = {
        "access_secret": "access-secret",
        "refresh_secret": "refresh-secret",
        "access_ttl_minutes": 15,
        "refresh_ttl_days": 7,
        "issuer": "mobile-app-skeleton",
        "audience": "mobile-app-users",
    }
    values.update(overrides)
    return JwtTokenService(**values)


def test_password_hasher_round_trip_and_salting():
    hasher = PasswordHasher(rounds=4)

    first = hasher.hash("Aa1aaaaa")
    second = hasher.hash("Aa1aaaaa")

    assert first != second
    assert first.startswith("$2")
    assert hasher.verify("Aa1aaaaa", first) is True
    assert hasher.verify("Aa1aaaab", first) is False


def test_password_hasher_rejects_empty_password():
    hasher = PasswordHasher(rounds=4)

    with pytest.raises(EmptyPasswordError):
        hasher.hash("   ")
    assert hasher.verify("", "$2b$04$whatever") is False


def test_password_hasher_verify_never_raises_on_malformed_hash():
    assert PasswordHasher(rounds=4).verify("Aa1aaaaa", "not-a-bcrypt-hash") is False


def test_token_service_round_trip_carries_claims():
    service = _token_service()
    now = datetime.now(timezone.utc)

    token, expires_at = service.create_access_token(user_id="user-1", email="a@b.com", now=now)
    payload = service.decode_access_token(token=token)

    assert payload.user_id == "user-1"
    assert payload.email == "a@b.com"
    assert payload.type == "access"
    assert expires_at == now + timedelta(minutes=15)
    raw = jwt.decode(token, options={"verify_signature": False})
    assert raw["iss"] == "mobile-app-skeleton"
    assert raw["aud"] == "mobile-app-users"
    assert raw["jti"]


def test_refresh_tokens_use_their_own_secret_and_lifetime():
    service = _token_service()
    now = datetime.now(timezone.utc)

    token, expires_at = service.create_refresh_token(user_id="user-1", email="a@b.com", now=now)

    assert expires_at == now + timedelta(days=7)
    assert service.decode_token(token=token, expected_type="refresh").type == "refresh"
    with pytest.raises(TokenInvalidError):
        service.decode_access_token(token=token)


def test_tokens_minted_in_same_instant_differ():
    service = _token_service()
    now = datetime.now(timezone.utc)

    first, _ = service.create_refresh_token(user_id="user-1", email="a@b.com", now=now)
    second, _ = service.create_refresh_token(user_id="user-1", email="a@b.com", now=now)

    assert first != second


def test_token_type_is_checked_even_with_matching_secret():
    service = _token_service()
    forged = jwt.encode(
        {
            "userId": "user-1",
            "email": "a@b.com",
            "type": "refresh",
            "iss": "mobile-app-skeleton",
            "aud": "mobile-app-users",
            "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
        },
        "access-secret",
        algorithm="HS256",
    )

    with pytest.raises(WrongTokenTypeError):
        service.decode_access_token(token=forged)


def test_expired_token_is_reported_as_expired():
    service = _token_service()
    past = datetime.now(timezone.utc) - timedelta(hours=1)

    token, _ = service.create_access_token(user_id="user-1", email="a@b.com", now=past)

    with pytest.raises(TokenExpiredError):
        service.decode_access_token(token=token)


def test_token_from_other_issuer_is_invalid():
    token, _ = _token_service(issuer="someone-else").create_access_token(
        user_id="user-1",
        email="a@b.com",
        now=datetime.now(timezone.utc),
    )

    with pytest.raises(TokenInvalidError):
        _token_service().decode_access_token(token=token)


def test_token_service_requires_two_distinct_secrets():
    with pytest.raises(ConfigurationError):
        _token_service(refresh_secret="")
    with pytest.raises(ConfigurationError):
        _token_service(refresh_secret="access-secret")


def test_verification_tokens_are_long_and_unique():
    service = _token_service()

    tokens = {service.generate_verification_token() for _ in range(20)}

    assert len(tokens) == 20
    assert all(len(token) == 64 for token in tokens)
