# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from flask import Response, jsonify, request, url_for
from pydantic import ValidationError

from parkingslot.domain.pagination import PageLink, PageRequest, PageResult
from parkingslot.interfaces.http.dto.pagination import (
    PagedResponseDTO,
    PageQueryDTO,
    PaginationHeaderDTO,
)
from parkingslot.shared.errors.validation import raise_validation_error

PAGINATION_HEADER = "X-Pagination"


def parse_page_query(default_page_size: int) -> PageRequest:
    args: dict[str, Any] = request.args.to_dict()
    args.setdefault("pageSize", default_page_size)
    try:
        dto = PageQueryDTO.model_validate(args)
    except ValidationError as exc:
        raise_validation_error(exc)
    return dto.to_request()


def _link_url(endpoint: str, link: PageLink | None) -> str | None:
    if link is None:
        return None
    params: dict[str, Any] = {"pageNumber": link.page_number, "pageSize": link.page_size}
    if link.order_by:
        params["orderBy"] = link.order_by
    return url_for(endpoint, _external=True, **params)


def pagination_header(page: PageResult[Any], endpoint: str) -> str:
    header = PaginationHeaderDTO(
        total_count=page.total_count,
        page_size=page.page_size,
        current_page=page.current_page,
        total_pages=page.total_pages,
        previous_page_link=_link_url(endpoint, page.previous_link),
        next_page_link=_link_url(endpoint, page.next_link),
    )
    return json.dumps(header.to_json())


def paged_response(
    page: PageResult[Any], endpoint: str, serialize: Callable[[Any], dict[str, Any]]
) -> Response:
    body = PagedResponseDTO(
        items=[serialize(item) for item in page.items],
        total_count=page.total_count,
    )
    response = jsonify(body.to_json())
    response.headers[PAGINATION_HEADER] = pagination_header(page, endpoint)
    return response


__all__ = ["PAGINATION_HEADER", "paged_response", "pagination_header", "parse_page_query"]
