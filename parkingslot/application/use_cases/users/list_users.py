# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.pagination import MAX_PAGE_SIZE, PageRequest, PageResult
from parkingslot.domain.users.entities import User
from parkingslot.domain.users.repositories import UserRepository


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository, max_page_size: int = MAX_PAGE_SIZE) -> None:
        self._users = users
        self._max_page_size = max_page_size

    def execute(self, request: PageRequest) -> PageResult[User]:
        return self._users.list_page(request.clamped(self._max_page_size))
