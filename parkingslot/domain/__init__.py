# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation, UnknownSortKeyError
from .pagination import PageLink, PageRequest, PageResult, SortColumn, SortMapping

__all__ = [
    "InvariantViolation",
    "PageLink",
    "PageRequest",
    "PageResult",
    "SortColumn",
    "SortMapping",
    "UnknownSortKeyError",
]
