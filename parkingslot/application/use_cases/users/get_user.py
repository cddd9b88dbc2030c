# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.entities import User
from parkingslot.domain.users.repositories import UserRepository
from parkingslot.shared.errors.base import NotFoundError


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user
