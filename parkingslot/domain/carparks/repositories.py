# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from parkingslot.domain.pagination import PageRequest, PageResult

from .entities import Carpark


class CarparkRepository(Protocol):
    def find_by_id(self, carpark_id: str) -> Carpark | None: ...
    def find_by_code(self, code: str) -> Carpark | None: ...
    def add(self, carpark: Carpark) -> Carpark: ...
    def delete(self, carpark_id: str) -> bool: ...
    def list_page(self, request: PageRequest) -> PageResult[Carpark]: ...
