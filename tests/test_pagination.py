import math

import pytest

from property_listings.services.pagination import ELLIPSIS, coerce_page, page_numbers, paginate, shown_range


def test_paginate_first_page():
    window = paginate(1, 6, 20)
    assert window.start_index == 0
    assert window.end_index == 6
    assert window.total_pages == 4
    assert window.has_prev_page is False
    assert window.has_next_page is True


def test_paginate_single_full_page_has_no_neighbours():
    window = paginate(1, 6, 6)
    assert window.has_next_page is False
    assert window.has_prev_page is False


def test_paginate_end_index_may_exceed_total():
    window = paginate(4, 6, 20)
    assert window.start_index == 18
    assert window.end_index == 24
    assert window.has_next_page is False
    assert window.has_prev_page is True


@pytest.mark.parametrize("page_size", [1, 2, 5, 6, 7, 12])
@pytest.mark.parametrize("total", [0, 1, 5, 6, 7, 13, 100])
def test_total_pages_is_ceiling(page_size, total):
    window = paginate(1, page_size, total)
    assert window.total_pages == math.ceil(total / page_size)
    assert (window.total_pages == 0) == (total == 0)


def test_empty_collection():
    window = paginate(1, 6, 0)
    assert window.total_pages == 0
    assert window.has_next_page is False
    assert shown_range(window, 0) == (0, 0)


def test_shown_range():
    assert shown_range(paginate(1, 6, 20), 6) == (1, 6)
    assert shown_range(paginate(4, 6, 20), 2) == (19, 20)
    assert shown_range(paginate(9, 6, 20), 0) == (0, 0)


@pytest.mark.parametrize(
    "current, total, expected",
    [
        (1, 1, [1]),
        (1, 0, []),
        (1, 5, [1, 2, 3, ELLIPSIS, 5]),
        (3, 5, [1, 2, 3, 4, 5]),
        (10, 10, [1, ELLIPSIS, 8, 9, 10]),
        (5, 20, [1, ELLIPSIS, 3, 4, 5, 6, 7, ELLIPSIS, 20]),
        (4, 20, [1, 2, 3, 4, 5, 6, ELLIPSIS, 20]),
        (17, 20, [1, ELLIPSIS, 15, 16, 17, 18, 19, 20]),
        (1, 20, [1, 2, 3, ELLIPSIS, 20]),
    ],
)
def test_page_numbers(current, total, expected):
    assert page_numbers(current, total) == expected


def test_page_numbers_never_repeat_a_page():
    for total in range(1, 30):
        for current in range(1, total + 1):
            pages = [p for p in page_numbers(current, total) if p != ELLIPSIS]
            assert len(pages) == len(set(pages))
            assert pages == sorted(pages)
            assert pages[0] == 1 and pages[-1] == total
            assert current in pages


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("2", 2), (" 7 ", 7), (5, 5)],
)
def test_coerce_page(raw, expected):
    assert coerce_page(raw) == expected
