# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from parkingslot.domain.pagination import PageRequest, PageResult, SortMapping, build_page


def order_clauses(model: type, mapping: SortMapping, order_by: str | None) -> list[Any]:
    clauses: list[Any] = []
    seen: set[str] = set()
    for term in mapping.resolve(order_by):
        column = getattr(model, term.attribute)
        clauses.append(column.desc() if term.descending else column.asc())
        seen.add(term.attribute)
    # stable tie-break on insertion order
    for attribute in ("created_at", "id"):
        if attribute not in seen:
            clauses.append(getattr(model, attribute).asc())
    return clauses


def fetch_page(
    session: Session,
    model: type,
    mapping: SortMapping,
    request: PageRequest,
    *,
    base: Select | None = None,
) -> PageResult[Any]:
    """Count the matching rows and load one ordered page of them."""
    query = base if base is not None else select(model)
    clauses = order_clauses(model, mapping, request.order_by)
    total = int(session.scalar(select(func.count()).select_from(query.order_by(None).subquery())) or 0)
    if request.offset >= total:
        # past the last page: empty items, metadata still filled in
        return build_page(total, [], request)
    rows = session.scalars(
        query.order_by(*clauses).offset(request.offset).limit(request.page_size)
    ).all()
    return build_page(total, rows, request)


__all__ = ["fetch_page", "order_clauses"]
