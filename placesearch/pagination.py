"""Client-side pagination over the cached result set.

Everything here is a pure function of its arguments. Page numbers are 1-based
for callers; internally a page is addressed by ``start``, the offset of its
first record, which is always a multiple of ``page_size``.
"""
from __future__ import annotations

import math
from typing import Sequence, TypeVar

from .models import PageView, PlaceRecord

T = TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")


def page_count(total: int, page_size: int) -> int:
    """Number of pages; an empty result set still has one (empty) page."""
    _check_page_size(page_size)
    return max(1, math.ceil(total / page_size))


def clamp_start(start: int, total: int, page_size: int) -> int:
    """Snap ``start`` down to a page boundary and keep it on an existing page."""
    last_start = (page_count(total, page_size) - 1) * page_size
    aligned = (max(start, 0) // page_size) * page_size
    return min(aligned, last_start)


def slice_records(records: Sequence[T], start: int, page_size: int) -> list[T]:
    _check_page_size(page_size)
    if start < 0:
        return []
    return list(records[start : start + page_size])


def go_to_page(page_number: int, page_size: int) -> int:
    """Start offset for a 1-based page number; callers re-clamp the result."""
    _check_page_size(page_size)
    return (page_number - 1) * page_size


def build_page_view(records: Sequence[PlaceRecord], start: int, page_size: int) -> PageView:
    total = len(records)
    start = clamp_start(start, total, page_size)
    return PageView(
        items=slice_records(records, start, page_size),
        page_number=start // page_size + 1,
        total_pages=page_count(total, page_size),
        start=start,
        page_size=page_size,
        total_items=total,
    )
