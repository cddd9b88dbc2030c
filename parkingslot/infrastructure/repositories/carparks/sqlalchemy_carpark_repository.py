# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from parkingslot.domain.carparks.entities import Carpark as DomainCarpark
from parkingslot.domain.carparks.exceptions import CarparkAlreadyExistsError
from parkingslot.domain.carparks.repositories import CarparkRepository
from parkingslot.domain.pagination import PageRequest, PageResult, SortColumn, SortMapping
from parkingslot.infrastructure.db.models import Carpark
from parkingslot.infrastructure.db.session import session_scope
from parkingslot.infrastructure.repositories.sorting import fetch_page

CARPARK_SORT_MAPPING = SortMapping(
    name="carparks",
    columns={
        "carparkId": SortColumn.of("carpark_id"),
        "carparkName": SortColumn.of("carpark_name"),
        "lotType": SortColumn.of("lot_type"),
        "area": SortColumn.of("area"),
        "agencyType": SortColumn.of("agency_type"),
        "address": SortColumn.of("address"),
        "location": SortColumn.of("area", "address"),
    },
    default_key="carparkName",
)


def _to_domain(row: Carpark) -> DomainCarpark:
    return DomainCarpark(
        id=row.id,
        carpark_id=row.carpark_id,
        carpark_name=row.carpark_name,
        lot_type=row.lot_type,
        area=row.area,
        agency_type=row.agency_type,
        address=row.address,
        x_coord=row.x_coord,
        y_coord=row.y_coord,
        created_at=row.created_at,
    )


class SqlAlchemyCarparkRepository(CarparkRepository):
    def find_by_id(self, carpark_id: str) -> DomainCarpark | None:
        with session_scope() as session:
            row = session.get(Carpark, carpark_id)
            return _to_domain(row) if row else None

    def find_by_code(self, code: str) -> DomainCarpark | None:
        with session_scope() as session:
            row = session.scalars(select(Carpark).where(Carpark.carpark_id == code)).first()
            return _to_domain(row) if row else None

    def add(self, carpark: DomainCarpark) -> DomainCarpark:
        try:
            with session_scope() as session:
                row = Carpark(
                    id=carpark.id,
                    carpark_id=carpark.carpark_id,
                    carpark_name=carpark.carpark_name,
                    lot_type=carpark.lot_type,
                    area=carpark.area,
                    agency_type=carpark.agency_type,
                    address=carpark.address,
                    x_coord=carpark.x_coord,
                    y_coord=carpark.y_coord,
                    created_at=carpark.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise CarparkAlreadyExistsError(context={"carparkId": carpark.carpark_id}) from exc

    def delete(self, carpark_id: str) -> bool:
        with session_scope() as session:
            result = session.execute(delete(Carpark).where(Carpark.id == carpark_id))
            return bool(result.rowcount)

    def list_page(self, request: PageRequest) -> PageResult[DomainCarpark]:
        with session_scope() as session:
            page = fetch_page(session, Carpark, CARPARK_SORT_MAPPING, request)
            return page.map(_to_domain)


__all__ = ["CARPARK_SORT_MAPPING", "SqlAlchemyCarparkRepository"]
