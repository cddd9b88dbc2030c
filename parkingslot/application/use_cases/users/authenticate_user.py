# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from parkingslot.domain.users.entities import User
from parkingslot.domain.users.exceptions import InvalidCredentialsError
from parkingslot.domain.users.repositories import PasswordHasher, TokenService, UserRepository


@dataclass(slots=True, frozen=True)
class AuthenticatedUser:
    user: User
    token: str


class AuthenticateUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens

    def execute(self, username: str, password: str) -> AuthenticatedUser:
        user = self._users.find_by_username(username)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        # Unknown user and wrong password are reported the same way
        if user is None or not password_valid:
            raise InvalidCredentialsError()

        return AuthenticatedUser(user=user, token=self._tokens.issue_session(user))
