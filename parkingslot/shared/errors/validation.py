# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

_BODY = "body"


def _field_path(loc: tuple[Any, ...]) -> str:
    # locations use the camelCase aliases the client sent
    return ".".join(str(part) for part in loc if part is not None) or _BODY


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Group pydantic errors by field: ``{"fields": {"email": ["..."]}, "errors": [...]}``."""
    by_field: dict[str, list[str]] = {}
    errors: list[dict[str, str]] = []

    for error in exc.errors(include_url=False, include_input=False):
        field = _field_path(tuple(error.get("loc", ())))
        message = error.get("msg", "")
        by_field.setdefault(field, []).append(message)
        errors.append({"field": field, "type": error.get("type", "value_error"), "message": message})

    return {"fields": by_field, "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    context = format_pydantic_errors(exc)
    first_field = next(iter(context["fields"]), _BODY)
    raise ValidationError(
        message=f"Request validation failed for '{first_field}'",
        context=context,
    ) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
