# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.entities import User
from parkingslot.domain.users.exceptions import InvalidCredentialsError
from parkingslot.domain.users.repositories import PasswordHasher, UserRepository


class ResetPasswordUseCase:
    """Change a password for a caller who still knows the current one."""

    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, old_password: str, new_password: str) -> User:
        user = self._users.find_by_username(username)
        if user is None or not self._password_hasher.verify(old_password, user.password_hash):
            raise InvalidCredentialsError()
        return self._users.update_password(user.id, self._password_hasher.hash(new_password))
