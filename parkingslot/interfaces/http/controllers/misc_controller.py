# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from parkingslot.infrastructure.health import check_database
from parkingslot.shared.logging import logger


class MiscController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True, "database": "ok"}
        try:
            missing = check_database()
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed {type(exc).__name__}")
            status.update(ok=False, database="error")
            return jsonify(status)

        if missing:
            logger.warning(f"health: schema incomplete, missing={missing}")
            status.update(ok=False, database="degraded", missingTables=missing)
        return jsonify(status)
