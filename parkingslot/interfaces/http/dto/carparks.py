from __future__ import annotations

from pydantic import Field

from parkingslot.application.use_cases.carparks.create_carpark import NewCarpark
from parkingslot.domain.carparks.entities import Carpark

from .base import CamelModel


class CreateCarparkRequestDTO(CamelModel):
    carpark_id: str = Field(min_length=1, max_length=32)
    carpark_name: str = Field(min_length=1, max_length=256)
    lot_type: str | None = Field(default=None, max_length=16)
    area: str | None = Field(default=None, max_length=128)
    agency_type: str | None = Field(default=None, max_length=32)
    address: str | None = Field(default=None, max_length=512)
    x_coord: float | None = None
    y_coord: float | None = None

    def to_new_carpark(self) -> NewCarpark:
        return NewCarpark(**self.model_dump())


class CarparkDTO(CamelModel):
    id: str
    carpark_id: str
    carpark_name: str
    lot_type: str | None = None
    area: str | None = None
    agency_type: str | None = None
    address: str | None = None
    x_coord: float | None = None
    y_coord: float | None = None

    @classmethod
    def from_entity(cls, carpark: Carpark) -> CarparkDTO:
        return cls(
            id=carpark.id,
            carpark_id=carpark.carpark_id,
            carpark_name=carpark.carpark_name,
            lot_type=carpark.lot_type,
            area=carpark.area,
            agency_type=carpark.agency_type,
            address=carpark.address,
            x_coord=carpark.x_coord,
            y_coord=carpark.y_coord,
        )
