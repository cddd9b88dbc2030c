# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from parkingslot.domain.exceptions import InvariantViolation


class Role(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class TokenPurpose(str, Enum):
    SESSION = "session"
    RESET = "reset"


@dataclass(slots=True, frozen=True)
class User:

    id: str
    first_name: str
    last_name: str
    username: str
    email: str
    phone_number: str | None
    password_hash: str
    created_at: datetime
    role: Role = Role.USER
    token_version: int = 0

    def __post_init__(self) -> None:
        if not self.username:
            raise InvariantViolation("username cannot be empty", field="username")
        if self.token_version < 0:
            raise InvariantViolation("token version cannot be negative", field="tokenVersion")

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(slots=True, frozen=True)
class TokenClaims:

    subject_id: str
    role: str | None
    issued_at: datetime | None
    expires_at: datetime
    version: int = 0
    purpose: TokenPurpose = TokenPurpose.SESSION
