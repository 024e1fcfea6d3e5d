"""Pagination — page/limit arithmetic shared by pushed-down and in-memory paging."""

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageMeta:
    page: int
    limit: int
    total: int
    prev_page: int | None
    next_page: int | None


def page_offset(page: int, limit: int) -> int:
    """Rows to skip before the requested page (page is 1-based)."""
    return (page - 1) * limit


def build_page_meta(page: int, limit: int, total: int) -> PageMeta:
    total_pages = math.ceil(total / limit) if limit else 0
    return PageMeta(
        page=page,
        limit=limit,
        total=total,
        prev_page=page - 1 if page > 1 else None,
        next_page=page + 1 if page < total_pages else None,
    )


def slice_page(items: Sequence[T], page: int, limit: int) -> list[T]:
    skip = page_offset(page, limit)
    return list(items[skip:skip + limit])
