# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.carparks.repositories import CarparkRepository
from parkingslot.shared.errors.base import NotFoundError


class DeleteCarparkUseCase:
    def __init__(self, *, carparks: CarparkRepository) -> None:
        self._carparks = carparks

    def execute(self, carpark_id: str) -> None:
        if not self._carparks.delete(carpark_id):
            raise NotFoundError("carpark", carpark_id)
