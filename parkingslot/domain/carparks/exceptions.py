# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.shared.errors.base import DomainError


class CarparkAlreadyExistsError(DomainError):
    code = "carpark_already_exists"
    message = "A carpark with this code already exists"
