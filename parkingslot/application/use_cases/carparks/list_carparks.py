# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from parkingslot.domain.carparks.entities import Carpark
from parkingslot.domain.carparks.repositories import CarparkRepository
from parkingslot.domain.pagination import MAX_PAGE_SIZE, PageRequest, PageResult


class ListCarparksUseCase:
    def __init__(self, *, carparks: CarparkRepository, max_page_size: int = MAX_PAGE_SIZE) -> None:
        self._carparks = carparks
        self._max_page_size = max_page_size

    def execute(self, request: PageRequest) -> PageResult[Carpark]:
        return self._carparks.list_page(request.clamped(self._max_page_size))
