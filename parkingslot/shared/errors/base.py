# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str | None = None
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.code,
            "message": self.message or self.code.replace("_", " ").capitalize(),
        }
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str | None, getattr(self, "message", None))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, message=message, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            message=message or "Request validation failed",
            context=context,
        )


class NotFoundError(AppError):
    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        context = {"id": resource_id} if resource_id is not None else None
        super().__init__(
            code=f"{resource}_not_found",
            status=HTTPStatus.NOT_FOUND,
            message=f"{resource.capitalize()} not found",
            context=context,
        )


class AuthenticationError(AppError):
    def __init__(self, code: str = "authentication_required", message: str | None = None) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNAUTHORIZED,
            message=message or "Authentication required",
        )


class AuthorizationError(AppError):
    def __init__(self, code: str = "forbidden", message: str | None = None) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.FORBIDDEN,
            message=message or "You do not have permission to perform this action",
        )


class RateLimitedError(AppError):
    def __init__(self, retry_after: float | None = None) -> None:
        super().__init__(
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            message="Too many requests, please try again later",
            context={"retryAfter": math.ceil(retry_after)} if retry_after else None,
        )
