import math
from typing import List, Optional, Tuple, Union

from property_listings.schemas.pagination import PageWindow

ELLIPSIS = "..."
PAGE_DELTA = 2


def coerce_page(raw: Optional[Union[str, int]]) -> int:
    """Map a raw ``?page=`` value to a valid 1-based page number.

    ``paginate`` assumes a page >= 1; routers call this first.
    """
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def paginate(current_page: int, page_size: int, total_count: int) -> PageWindow:
    start_index = (current_page - 1) * page_size
    total_pages = math.ceil(total_count / page_size)
    return PageWindow(
        current_page=current_page,
        page_size=page_size,
        total_count=total_count,
        start_index=start_index,
        end_index=start_index + page_size,
        total_pages=total_pages,
        has_prev_page=current_page > 1,
        has_next_page=current_page < total_pages,
    )


def shown_range(window: PageWindow, fetched_count: int) -> Tuple[int, int]:
    """1-based inclusive range of the listings on this page, ``(0, 0)`` when it is empty."""
    if fetched_count <= 0:
        return 0, 0
    return window.start_index + 1, min(window.end_index, window.total_count)


def page_numbers(current_page: int, total_pages: int, delta: int = PAGE_DELTA) -> List[Union[int, str]]:
    window_start = max(1, current_page - delta)
    window_end = min(total_pages, current_page + delta)

    pages: List[Union[int, str]] = []
    if window_start > 1:
        pages.append(1)
        if window_start > 2:
            pages.append(ELLIPSIS)

    pages.extend(range(window_start, window_end + 1))

    if window_end < total_pages:
        if window_end < total_pages - 1:
            pages.append(ELLIPSIS)
        pages.append(total_pages)
    return pages
