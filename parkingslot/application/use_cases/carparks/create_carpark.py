# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from parkingslot.domain.carparks.entities import Carpark
from parkingslot.domain.carparks.exceptions import CarparkAlreadyExistsError
from parkingslot.domain.carparks.repositories import CarparkRepository


@dataclass(slots=True, frozen=True)
class NewCarpark:
    carpark_id: str
    carpark_name: str
    lot_type: str | None = None
    area: str | None = None
    agency_type: str | None = None
    address: str | None = None
    x_coord: float | None = None
    y_coord: float | None = None


class CreateCarparkUseCase:
    def __init__(self, *, carparks: CarparkRepository) -> None:
        self._carparks = carparks

    def execute(self, data: NewCarpark) -> Carpark:
        if self._carparks.find_by_code(data.carpark_id):
            raise CarparkAlreadyExistsError(context={"carparkId": data.carpark_id})

        carpark = Carpark(
            id=str(uuid.uuid4()),
            carpark_id=data.carpark_id,
            carpark_name=data.carpark_name,
            lot_type=data.lot_type,
            area=data.area,
            agency_type=data.agency_type,
            address=data.address,
            x_coord=data.x_coord,
            y_coord=data.y_coord,
            created_at=datetime.now(UTC),
        )
        return self._carparks.add(carpark)
