from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from parkingslot.application.services.token_service import JwtTokenService
from parkingslot.domain.users.entities import Role, TokenPurpose
from parkingslot.domain.users.exceptions import (
    MalformedTokenError,
    MissingClaimError,
    TokenExpiredError,
)


def test_issue_then_validate_returns_embedded_claims(token_service: JwtTokenService, clock) -> None:
    token = token_service.issue("user-1", Role.ADMIN, timedelta(hours=1))

    claims = token_service.validate(token)

    assert claims.subject_id == "user-1"
    assert claims.role == "Admin"
    assert claims.purpose is TokenPurpose.SESSION
    assert claims.expires_at == clock.now + timedelta(hours=1)
    assert claims.issued_at is not None
    assert claims.expires_at > claims.issued_at


def test_session_and_reset_lifetimes(token_service: JwtTokenService, clock, user_factory) -> None:
    user = user_factory("bob")

    session = token_service.validate(token_service.issue_session(user))
    reset = token_service.validate(token_service.issue_reset(user))

    assert session.expires_at - clock.now == timedelta(days=7)
    assert reset.expires_at - clock.now == timedelta(days=1)
    assert reset.purpose is TokenPurpose.RESET
    assert session.version == user.token_version


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-5)])
def test_non_positive_ttl_is_rejected(token_service: JwtTokenService, ttl: timedelta) -> None:
    with pytest.raises(ValueError):
        token_service.issue("user-1", Role.USER, ttl)


@pytest.mark.parametrize("elapsed", [timedelta(hours=1), timedelta(hours=1, seconds=1), timedelta(days=30)])
def test_expired_token_always_reports_expiry(
    token_service: JwtTokenService, clock, elapsed: timedelta
) -> None:
    token = token_service.issue("user-1", Role.USER, timedelta(hours=1))
    issued = clock.now
    clock.now = issued + elapsed

    with pytest.raises(TokenExpiredError) as exc_info:
        token_service.validate(token)

    assert exc_info.value.expired_at == issued + timedelta(hours=1)
    assert "Token expired on:" in exc_info.value.message


@pytest.mark.parametrize("raw", ["", "not-a-token", "a.b.c"])
def test_garbage_is_malformed(token_service: JwtTokenService, raw: str) -> None:
    with pytest.raises(MalformedTokenError):
        token_service.validate(raw)


def test_token_signed_with_other_key_is_malformed(token_service: JwtTokenService, clock) -> None:
    forged = jwt.encode(
        {"sub": "user-1", "exp": int(clock.now.timestamp()) + 60},
        "some-other-signing-key-0123456789abcdef",
        algorithm="HS256",
    )

    with pytest.raises(MalformedTokenError):
        token_service.validate(forged)


def test_missing_exp_claim(token_service: JwtTokenService, auth_settings) -> None:
    token = jwt.encode({"sub": "user-1"}, auth_settings.secret_key, algorithm="HS256")

    with pytest.raises(MissingClaimError) as exc_info:
        token_service.validate(token)

    assert exc_info.value.claim == "exp"


def test_missing_subject_claim(token_service: JwtTokenService, auth_settings, clock) -> None:
    token = jwt.encode(
        {"role": "User", "exp": int(clock.now.timestamp()) + 60},
        auth_settings.secret_key,
        algorithm="HS256",
    )

    with pytest.raises(MissingClaimError) as exc_info:
        token_service.validate(token)

    assert exc_info.value.claim == "sub"


def test_non_numeric_exp_is_malformed(token_service: JwtTokenService, auth_settings) -> None:
    token = jwt.encode({"sub": "user-1", "exp": "tomorrow"}, auth_settings.secret_key, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        token_service.validate(token)
