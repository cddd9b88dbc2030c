# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.users.entities import Role
from parkingslot.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from parkingslot.shared.config import load_config
from parkingslot.shared.logging import logger


class AdminSetupError(Exception):
    pass


class AdminSetup:
    def __init__(self, users: SqlAlchemyUserRepository) -> None:
        self._users = users

    def setup_admin_user(self, username: str | None) -> bool:
        if not username:
            logger.info("admin_setup: No ADMIN_USERNAME configured, skipping admin setup")
            return False

        try:
            user = self._users.find_by_username(username)
            if user is None:
                logger.warning(
                    f"admin_setup: ADMIN_USERNAME '{username}' not found, "
                    f"register it and restart to grant admin privileges"
                )
                return False

            if user.is_admin:
                logger.info(f"admin_setup: User '{username}' already has admin privileges")
                return True

            self._users.set_role(username, Role.ADMIN)
            logger.info(f"admin_setup: Granted admin privileges to user '{username}'")
            return True
        except Exception as e:
            logger.error(f"admin_setup: Failed to setup admin user: {e}")
            raise AdminSetupError(f"Failed to setup admin user: {e}") from e


def setup_admin_user(users: SqlAlchemyUserRepository | None = None) -> bool:
    return AdminSetup(users or SqlAlchemyUserRepository()).setup_admin_user(
        load_config().admin_username
    )


__all__ = [
    "AdminSetup",
    "AdminSetupError",
    "setup_admin_user",
]
