from __future__ import annotations

from typing import Any

from pydantic import Field

from parkingslot.domain.pagination import DEFAULT_PAGE_SIZE, PageRequest

from .base import CamelModel


class PageQueryDTO(CamelModel):
    order_by: str | None = Field(default=None, max_length=200)
    page_number: int = Field(default=1, ge=1)
    # out-of-range sizes are clamped, not rejected
    page_size: int = DEFAULT_PAGE_SIZE

    def to_request(self) -> PageRequest:
        return PageRequest(
            page_number=self.page_number,
            page_size=self.page_size,
            order_by=self.order_by or None,
        )


class PagedResponseDTO(CamelModel):
    items: list[dict[str, Any]]
    total_count: int


class PaginationHeaderDTO(CamelModel):
    total_count: int
    page_size: int
    current_page: int
    total_pages: int
    previous_page_link: str | None = None
    next_page_link: str | None = None
