# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, jsonify, request
from werkzeug.exceptions import MethodNotAllowed, NotFound

from parkingslot.shared.errors import register_error_handler
from parkingslot.shared.logging import logger


def configure_error_handling(app: Flask) -> None:
    register_error_handler(app)

    # Unknown routes answer in the same JSON shape as AppError
    @app.errorhandler(NotFound)
    def _route_not_found(exc: NotFound):
        logger.info(f"No route for {request.method} {request.path}")
        return jsonify({"error": "route_not_found", "message": "Resource not found"}), 404

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(exc: MethodNotAllowed):
        response = jsonify(
            {"error": "method_not_allowed", "message": f"{request.method} is not supported here"}
        )
        response.headers["Allow"] = ", ".join(exc.valid_methods or [])
        return response, 405


__all__ = ["configure_error_handling"]
