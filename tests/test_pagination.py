"""Unit tests for smart_finance.pagination."""

from __future__ import annotations

import pytest

from smart_finance.pagination import ELLIPSIS, iter_pages, page_window, paginate, resolve_page, total_pages


def test_total_pages() -> None:
    assert total_pages(0, 6) == 0
    assert total_pages(6, 6) == 1
    assert total_pages(13, 6) == 3


@pytest.mark.parametrize("size", [0, -1])
def test_page_size_must_be_positive(size) -> None:
    with pytest.raises(ValueError):
        total_pages(10, size)


def test_window_shows_every_page_up_to_seven() -> None:
    for current in range(1, 8):
        assert page_window(current, 7) == [1, 2, 3, 4, 5, 6, 7]


def test_window_for_eight_pages() -> None:
    assert page_window(1, 8) == [1, 2, 3, 4, 5, ELLIPSIS, 8]
    assert page_window(4, 8) == [1, 2, 3, 4, 5, ELLIPSIS, 8]
    assert page_window(5, 8) == [1, ELLIPSIS, 4, 5, 6, 7, 8]
    assert page_window(8, 8) == [1, ELLIPSIS, 4, 5, 6, 7, 8]


def test_window_in_the_middle() -> None:
    assert page_window(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]
    assert page_window(6, 10) == [1, ELLIPSIS, 5, 6, 7, ELLIPSIS, 10]
    assert page_window(7, 10) == [1, ELLIPSIS, 6, 7, 8, 9, 10]


def test_window_always_contains_current_page() -> None:
    for pages in range(1, 15):
        for current in range(1, pages + 1):
            window = page_window(current, pages)
            assert current in window
            assert window[0] == 1
            assert window[-1] == pages


def test_paginate_slices_items() -> None:
    items = list(range(20))
    page = paginate(items, 6, 2)

    assert page.items == [6, 7, 8, 9, 10, 11]
    assert page.total_pages == 4
    assert page.current_page == 2
    assert page.has_previous and page.has_next
    assert paginate(items, 6, 4).items == [18, 19]


def test_concatenated_pages_reproduce_the_list() -> None:
    items = list(range(23))
    assert [x for page in iter_pages(items, 6) for x in page] == items


def test_page_past_the_end_resets_to_first_page() -> None:
    assert resolve_page(5, 2) == 1
    assert resolve_page(0, 2) == 1
    assert resolve_page(2, 2) == 2
    page = paginate(list(range(4)), 6, 3)
    assert page.current_page == 1
    assert page.items == [0, 1, 2, 3]


def test_empty_list() -> None:
    page = paginate([], 6)
    assert page.items == []
    assert page.total_pages == 0
    assert page.display_window == []
    assert not page.has_next
