# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from parkingslot.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class Carpark:
    """A public carpark as published by the operating agency."""

    id: str
    carpark_id: str
    carpark_name: str
    lot_type: str | None
    area: str | None
    agency_type: str | None
    address: str | None
    x_coord: float | None
    y_coord: float | None
    created_at: datetime

    def __post_init__(self) -> None:
        if not self.carpark_id:
            raise InvariantViolation("carpark code cannot be empty", field="carparkId")
        if not self.carpark_name:
            raise InvariantViolation("carpark name cannot be empty", field="carparkName")
