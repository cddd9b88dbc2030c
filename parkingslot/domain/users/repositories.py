# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from parkingslot.domain.pagination import PageRequest, PageResult

from .entities import Role, TokenClaims, TokenPurpose, User


class UserRepository(Protocol):
    def find_by_id(self, user_id: str) -> User | None: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update(self, user: User) -> User: ...
    def update_password(self, user_id: str, password_hash: str) -> User: ...
    def delete(self, user_id: str) -> bool: ...
    def list_page(self, request: PageRequest) -> PageResult[User]: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(
        self,
        subject_id: str,
        role: Role | str | None,
        ttl: timedelta,
        *,
        version: int = 0,
        purpose: TokenPurpose = TokenPurpose.SESSION,
    ) -> str: ...
    def issue_session(self, user: User) -> str: ...
    def issue_reset(self, user: User) -> str: ...
    def validate(self, token: str) -> TokenClaims: ...
