# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any

from flask import g, request

from parkingslot.domain.users.entities import Role, TokenPurpose
from parkingslot.domain.users.exceptions import InvalidTokenError
from parkingslot.domain.users.repositories import TokenService, UserRepository
from parkingslot.shared.errors.base import AuthenticationError, AuthorizationError
from parkingslot.shared.logging import logger

_REVOKED_MESSAGE = "Token is no longer valid. Please sign in again."


@dataclass(slots=True, frozen=True)
class Principal:
    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def _bearer_token() -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


class BearerAuthenticator:
    """Resolves the caller from an ``Authorization: Bearer`` session token."""

    def __init__(self, *, tokens: TokenService, users: UserRepository) -> None:
        self._tokens = tokens
        self._users = users

    def authenticate_request(self) -> Principal:
        token = _bearer_token()
        if not token:
            logger.warning(f"auth: no bearer token on {request.method} {request.path}")
            raise AuthenticationError()

        try:
            claims = self._tokens.validate(token)
        except InvalidTokenError as exc:
            logger.info(f"auth: rejected token ({exc.code}) on {request.method} {request.path}")
            raise AuthenticationError("invalid_token", exc.message) from exc

        if claims.purpose is not TokenPurpose.SESSION:
            raise AuthenticationError("invalid_token", "A session token is required")

        user = self._users.find_by_id(claims.subject_id)
        if user is None or user.token_version != claims.version:
            logger.info(f"auth: revoked token for user_id={claims.subject_id}")
            raise AuthenticationError("token_revoked", _REVOKED_MESSAGE)

        g.user_id = user.id
        g.role = user.role.value
        return Principal(user_id=user.id, role=user.role)

    def require_auth(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            g.principal = self.authenticate_request()
            return func(*args, **kwargs)

        return wrapper

    def require_role(self, *roles: Role) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                principal = self.authenticate_request()
                if principal.role not in roles:
                    logger.warning(
                        f"auth: user {principal.user_id} lacks role "
                        f"{[role.value for role in roles]} on {request.method} {request.path}"
                    )
                    raise AuthorizationError()
                g.principal = principal
                return func(*args, **kwargs)

            return wrapper

        return decorator


def current_principal() -> Principal:
    principal = getattr(g, "principal", None)
    if principal is None:
        raise AuthenticationError()
    return principal


def ensure_self_or_admin(user_id: str) -> Principal:
    principal = current_principal()
    if principal.user_id != user_id and not principal.is_admin:
        logger.warning(f"auth: user {principal.user_id} may not modify user {user_id}")
        raise AuthorizationError()
    return principal


__all__ = [
    "BearerAuthenticator",
    "Principal",
    "current_principal",
    "ensure_self_or_admin",
]
