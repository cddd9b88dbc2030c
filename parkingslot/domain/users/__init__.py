# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Role, TokenClaims, TokenPurpose, User
from .repositories import PasswordHasher, TokenService, UserRepository

__all__ = [
    "PasswordHasher",
    "Role",
    "TokenClaims",
    "TokenPurpose",
    "TokenService",
    "User",
    "UserRepository",
]
