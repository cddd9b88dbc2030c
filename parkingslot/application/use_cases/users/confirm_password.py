# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.entities import TokenPurpose, User
from parkingslot.domain.users.exceptions import InvalidResetRequestError, TokenRevokedError
from parkingslot.domain.users.repositories import PasswordHasher, TokenService, UserRepository


class ConfirmPasswordUseCase:
    """Set a new password at the end of the reset-link flow.

    Only the holder of a current reset token for ``user_id`` may do this.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, user_id: str, new_password: str, token: str) -> User:
        claims = self._tokens.validate(token)
        if claims.purpose is not TokenPurpose.RESET or claims.subject_id != user_id:
            raise InvalidResetRequestError()

        user = self._users.find_by_id(user_id)
        if user is None:
            raise InvalidResetRequestError()
        if claims.version != user.token_version:
            raise TokenRevokedError()

        return self._users.update_password(user.id, self._password_hasher.hash(new_password))
