# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed session tokens (JWT, HMAC)."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from parkingslot.domain.users.entities import Role, TokenClaims, TokenPurpose, User
from parkingslot.domain.users.exceptions import (
    MalformedTokenError,
    MissingClaimError,
    TokenExpiredError,
)
from parkingslot.domain.users.repositories import TokenService
from parkingslot.shared.config import AuthConfig

# exp is checked against the injected clock, not by PyJWT
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "require": [],
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """Issues and validates stateless tokens.

    The service never consults a store: callers confirm that the subject still
    exists and that ``version`` matches the user's current token version.
    """

    def __init__(self, settings: AuthConfig, clock: Callable[[], datetime] | None = None) -> None:
        self._settings = settings
        self._clock = clock or _utcnow

    def issue(
        self,
        subject_id: str,
        role: Role | str | None,
        ttl: timedelta,
        *,
        version: int = 0,
        purpose: TokenPurpose = TokenPurpose.SESSION,
    ) -> str:
        if ttl <= timedelta(0):
            raise ValueError("token ttl must be positive")
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + max(1, math.ceil(ttl.total_seconds()))
        claims: dict[str, Any] = {
            "sub": str(subject_id),
            "role": role.value if isinstance(role, Role) else role,
            "ver": int(version),
            "typ": TokenPurpose(purpose).value,
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(claims, self._settings.secret_key, algorithm=self._settings.algorithm)

    def issue_session(self, user: User) -> str:
        return self.issue(
            user.id,
            user.role,
            self._settings.session_token_ttl,
            version=user.token_version,
            purpose=TokenPurpose.SESSION,
        )

    def issue_reset(self, user: User) -> str:
        return self.issue(
            user.id,
            user.role,
            self._settings.reset_token_ttl,
            version=user.token_version,
            purpose=TokenPurpose.RESET,
        )

    def validate(self, token: str) -> TokenClaims:
        if not token or not isinstance(token, str):
            raise MalformedTokenError()
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options=_DECODE_OPTIONS,
            )
        except jwt.PyJWTError as exc:
            raise MalformedTokenError() from exc

        exp = payload.get("exp")
        if exp is None:
            raise MissingClaimError("exp")
        expires_at = _timestamp(exp)
        if self._clock() >= expires_at:
            raise TokenExpiredError(expires_at)

        subject = payload.get("sub")
        if subject is None or subject == "":
            raise MissingClaimError("sub")
        if not isinstance(subject, str):
            raise MalformedTokenError()

        role = payload.get("role")
        version = payload.get("ver", 0)
        iat = payload.get("iat")
        if (role is not None and not isinstance(role, str)) or not _is_int(version):
            raise MalformedTokenError()
        try:
            purpose = TokenPurpose(payload.get("typ", TokenPurpose.SESSION.value))
        except ValueError as exc:
            raise MalformedTokenError() from exc

        return TokenClaims(
            subject_id=subject,
            role=role,
            issued_at=_timestamp(iat) if iat is not None else None,
            expires_at=expires_at,
            version=version,
            purpose=purpose,
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _timestamp(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedTokenError()
    try:
        return datetime.fromtimestamp(value, UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedTokenError() from exc


__all__ = ["JwtTokenService"]
