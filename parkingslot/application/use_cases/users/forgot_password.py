# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for emailing a password reset link."""

from __future__ import annotations

from parkingslot.application.interfaces import EmailSender
from parkingslot.application.services.reset_email import (
    build_reset_link,
    render_password_reset_email,
)
from parkingslot.domain.users.entities import User
from parkingslot.domain.users.exceptions import EmailNotFoundError
from parkingslot.domain.users.repositories import TokenService, UserRepository
from parkingslot.shared.logging import logger


class ForgotPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        mailer: EmailSender,
        frontend_url: str,
        reset_valid_hours: int = 24,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._mailer = mailer
        self._frontend_url = frontend_url
        self._reset_valid_hours = reset_valid_hours

    async def execute(self, email: str) -> User:
        user = self._users.find_by_email(email)
        if user is None:
            raise EmailNotFoundError()

        token = self._tokens.issue_reset(user)
        link = build_reset_link(self._frontend_url, user.id, token)
        message = render_password_reset_email(user, link, valid_hours=self._reset_valid_hours)

        await self._mailer.send(message)
        logger.info(f"users.forgot_password: reset link sent user_id={user.id}")
        return user
