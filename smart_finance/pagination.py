"""Page slicing and page-number windows for the transaction table."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, Sequence, TypeVar, Union

T = TypeVar('T')

ELLIPSIS = '...'
MAX_FULL_WINDOW = 7
EDGE_SPAN = 5

PageMarker = Union[int, str]


@dataclass
class Page(Generic[T]):
    items: List[T]
    total_pages: int
    current_page: int
    display_window: List[PageMarker] = field(default_factory=list)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def total_pages(count: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return math.ceil(count / page_size)


def resolve_page(current_page: int, pages: int) -> int:
    """Page to show after the item count changed.

    A page past the end (for example after a filter shrank the list) snaps
    back to page 1; anything below 1 becomes 1.
    """
    if current_page < 1:
        return 1
    if pages > 0 and current_page > pages:
        return 1
    return current_page


def page_window(current_page: int, pages: int) -> List[PageMarker]:
    """Page numbers to display, compressed with ellipses for long ranges.

    Up to seven pages are all shown.  Beyond that the window is the first
    five pages near the start, the last five near the end, or the current
    page with one neighbour each side in the middle, always anchored by
    the first and last page.
    """
    if pages <= MAX_FULL_WINDOW:
        return list(range(1, pages + 1))
    if current_page <= 4:
        return list(range(1, EDGE_SPAN + 1)) + [ELLIPSIS, pages]
    if current_page > pages - 4:
        return [1, ELLIPSIS] + list(range(pages - EDGE_SPAN + 1, pages + 1))
    return [1, ELLIPSIS, current_page - 1, current_page, current_page + 1, ELLIPSIS, pages]


def paginate(items: Sequence[T], page_size: int, current_page: int = 1) -> Page[T]:
    """Slice ``items`` into the requested page.

    ``current_page`` is passed through :func:`resolve_page` first, so the
    returned ``Page.current_page`` is the page actually shown.
    """
    pages = total_pages(len(items), page_size)
    page = resolve_page(current_page, pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total_pages=pages,
        current_page=page,
        display_window=page_window(page, pages),
    )


def iter_pages(items: Sequence[T], page_size: int) -> List[List[T]]:
    """Every page of ``items`` in order."""
    pages = total_pages(len(items), page_size)
    return [paginate(items, page_size, number).items for number in range(1, pages + 1)]
