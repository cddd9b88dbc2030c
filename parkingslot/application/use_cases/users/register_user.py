# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from parkingslot.domain.users.entities import Role, User
from parkingslot.domain.users.exceptions import EmailAlreadyExistsError, UserAlreadyExistsError
from parkingslot.domain.users.repositories import PasswordHasher, UserRepository


@dataclass(slots=True, frozen=True)
class Registration:
    first_name: str
    last_name: str
    username: str
    password: str
    email: str
    phone_number: str | None = None


class RegisterUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, registration: Registration) -> User:
        if self._users.find_by_username(registration.username):
            raise UserAlreadyExistsError()
        if self._users.find_by_email(registration.email):
            raise EmailAlreadyExistsError()

        user = User(
            id=str(uuid.uuid4()),
            first_name=registration.first_name,
            last_name=registration.last_name,
            username=registration.username,
            email=registration.email,
            phone_number=registration.phone_number,
            password_hash=self._password_hasher.hash(registration.password),
            created_at=datetime.now(UTC),
            role=Role.USER,
        )
        return self._users.add(user)
