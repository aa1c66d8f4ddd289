"""Page window parsing and pagination metadata shared by listing endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from app.utils.identifiers import MAX_ENTITY_ID

# Keeps OFFSET and LIMIT within a signed 64-bit bind parameter
MAX_PAGE_NUMBER = MAX_ENTITY_ID
MAX_PAGE_SIZE = MAX_ENTITY_ID


def parse_positive_int(value: Any, default: int) -> int:
    """Coerce query text to a positive int, falling back to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class PageWindow:
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def parse(
        cls, page: Any, limit: Any, *, default_limit: int = 10, max_limit: int | None = None
    ) -> "PageWindow":
        page_number = min(parse_positive_int(page, 1), MAX_PAGE_NUMBER)
        page_size = min(parse_positive_int(limit, default_limit), MAX_PAGE_SIZE)
        if max_limit is not None:
            page_size = min(page_size, max_limit)
        return cls(page=page_number, limit=page_size)


@dataclass(frozen=True)
class PageMeta:
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, window: PageWindow, total: int) -> "PageMeta":
        total_pages = math.ceil(total / window.limit) if total > 0 else 0
        return cls(
            current_page=window.page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=window.limit,
            has_next_page=window.page < total_pages,
            has_prev_page=window.page > 1,
        )


@dataclass
class Page:
    """One page of results together with its metadata."""

    items: list
    meta: PageMeta
