# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from parkingslot.shared.config import load_config
from parkingslot.shared.logging import get_correlation_id, logger

from .base import AppError


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _where() -> str:
    return f"{request.method} {request.path}"


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def register_error_handler(
    app: Flask, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.code} on {_where()}")
        elif exc.status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            logger.warning(f"Denied {exc.code} ({int(exc.status)}) on {_where()} from {_client_ip()}")
        else:
            logger.info(f"Handled {exc.code} ({int(exc.status)}) on {_where()}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        user_id = getattr(g, "user_id", None)
        if debug_mode:
            logger.exception(
                f"Unhandled exception on {_where()} from {_client_ip()}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.get_data(cache=True))}"
            )
        else:
            logger.error(f"Unhandled {type(exc).__name__} on {_where()} user={user_id}")

        # exception details stay in the log
        body = {
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "correlationId": get_correlation_id(),
        }
        return jsonify(body), default_status


__all__ = ["handle_app_error", "register_error_handler"]
