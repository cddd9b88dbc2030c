# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.shared.errors.base import DomainError


class InvariantViolationError(DomainError):
    code = "invariant_violation"

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message, context={"field": field} if field else None)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return str(self.message)


class UnknownSortKeyError(DomainError):
    code = "unknown_sort_key"

    def __init__(self, key: str, *, resource: str, allowed: list[str]) -> None:
        super().__init__(
            f"Cannot order {resource} by '{key}'",
            context={"orderBy": key, "allowed": allowed},
        )


InvariantViolation = InvariantViolationError
