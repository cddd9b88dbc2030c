# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.carparks.entities import Carpark
from parkingslot.domain.carparks.repositories import CarparkRepository
from parkingslot.shared.errors.base import NotFoundError


class GetCarparkUseCase:
    def __init__(self, *, carparks: CarparkRepository) -> None:
        self._carparks = carparks

    def execute(self, carpark_id: str) -> Carpark:
        carpark = self._carparks.find_by_id(carpark_id)
        if carpark is None:
            raise NotFoundError("carpark", carpark_id)
        return carpark
