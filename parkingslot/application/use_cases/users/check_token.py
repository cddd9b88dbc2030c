# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.entities import TokenClaims
from parkingslot.domain.users.exceptions import (
    TokenRequiredError,
    TokenRevokedError,
    TokenSubjectNotFoundError,
)
from parkingslot.domain.users.repositories import TokenService, UserRepository


class CheckTokenUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, token: str | None) -> TokenClaims:
        if not token:
            raise TokenRequiredError()

        claims = self._tokens.validate(token)
        user = self._users.find_by_id(claims.subject_id)
        if user is None:
            raise TokenSubjectNotFoundError()
        if user.token_version != claims.version:
            raise TokenRevokedError()
        return claims
