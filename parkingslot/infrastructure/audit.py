# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Audit trail for account, password and carpark events."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkingslot.shared.logging import logger


class AuditAction(str, Enum):
    # Authentication
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    REGISTER = "register"

    # Accounts
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"

    # Password lifecycle
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_CHANGED = "password_changed"

    # Carparks
    CARPARK_CREATED = "carpark_created"
    CARPARK_DELETED = "carpark_deleted"


_REDACTED_KEYS = ("password", "token", "secret", "phone", "email")


def _redact(details: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(part in key.lower() for part in _REDACTED_KEYS) else value
        for key, value in details.items()
    }


def _default_session_factory() -> Session:
    from parkingslot.infrastructure.db.session import SessionLocal

    return SessionLocal()


class AuditLogger:
    """Writes each event to the log and to the ``audit_logs`` table.

    Storage failures are logged, not raised.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or _default_session_factory

    def record(
        self,
        action: AuditAction,
        *,
        user_id: str | None = None,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        safe_details = _redact(details) if details else {}
        line = f"AUDIT: {action.value} | user_id={user_id} | ip={ip_address} | success={success}"
        if safe_details:
            line += f" | details={safe_details}"
        (logger.info if success else logger.warning)(line)

        self._store(action, user_id, ip_address, success, safe_details)

    def _store(
        self,
        action: AuditAction,
        user_id: str | None,
        ip_address: str | None,
        success: bool,
        details: dict[str, Any],
    ) -> None:
        from parkingslot.infrastructure.db.models import AuditLog

        session = self._session_factory()
        try:
            session.add(
                AuditLog(
                    timestamp=datetime.now(UTC),
                    action=action.value,
                    user_id=user_id,
                    ip_address=ip_address,
                    success=success,
                    details_json=json.dumps(details, default=str) if details else None,
                )
            )
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning(f"audit: could not store {action.value}: {type(exc).__name__}")
        finally:
            session.close()

    def recent(self, *, user_id: str | None = None, limit: int = 50) -> list[dict[str, Any]]:
        """Newest entries first, optionally only those of one user."""
        from parkingslot.infrastructure.db.models import AuditLog

        query = select(AuditLog).order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)

        session = self._session_factory()
        try:
            rows = session.scalars(query.limit(limit)).all()
            return [
                {
                    "action": row.action,
                    "userId": row.user_id,
                    "ipAddress": row.ip_address,
                    "success": row.success,
                    "details": json.loads(row.details_json) if row.details_json else {},
                    "timestamp": row.timestamp.isoformat(),
                }
                for row in rows
            ]
        finally:
            session.close()


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: str | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.record(
        action, user_id=user_id, ip_address=ip_address, details=details, success=success
    )


__all__ = ["AuditAction", "AuditLogger", "audit", "audit_log"]
