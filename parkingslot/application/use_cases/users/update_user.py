# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace

from parkingslot.domain.users.entities import User
from parkingslot.domain.users.exceptions import EmailAlreadyExistsError, UserAlreadyExistsError
from parkingslot.domain.users.repositories import UserRepository
from parkingslot.shared.errors.base import NotFoundError


@dataclass(slots=True, frozen=True)
class ProfileChanges:
    first_name: str
    last_name: str
    username: str
    email: str
    phone_number: str | None = None


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, changes: ProfileChanges) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)

        if changes.username != user.username:
            clash = self._users.find_by_username(changes.username)
            if clash is not None and clash.id != user.id:
                raise UserAlreadyExistsError()
        if changes.email.lower() != user.email.lower():
            clash = self._users.find_by_email(changes.email)
            if clash is not None and clash.id != user.id:
                raise EmailAlreadyExistsError()

        updated = replace(
            user,
            first_name=changes.first_name,
            last_name=changes.last_name,
            username=changes.username,
            email=changes.email,
            phone_number=changes.phone_number,
        )
        return self._users.update(updated)
