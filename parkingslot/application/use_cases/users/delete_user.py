# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.repositories import UserRepository
from parkingslot.shared.errors.base import NotFoundError


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> None:
        if not self._users.delete(user_id):
            raise NotFoundError("user", user_id)
