"""Page slicing and page-button windowing."""

import math
from typing import List, Sequence, Tuple, TypeVar

from ..core.config import DEFAULT_MAX_PAGE_BUTTONS, MIN_PAGE_BUTTONS
from ..core.types import ELLIPSIS_END, ELLIPSIS_START, PageItem

T = TypeVar("T")


def get_total_pages(total_items: int, page_size: int) -> int:
    """
    Number of pages for a result set, never less than 1.

    A non-positive page size counts as a single page.
    """
    if page_size < 1 or total_items <= 0:
        return 1
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp a 1-based page number into ``[1, total_pages]``."""
    if page > total_pages:
        return max(1, total_pages)
    if page < 1:
        return 1
    return page


def slice_page(items: Sequence[T], current_page: int, page_size: int) -> Sequence[T]:
    """
    Return the items of one page.

    The page is clamped to the valid range first, so requesting page 0 or a
    page past the end yields the first or last page respectively.

    Args:
        items: Full (filtered and sorted) sequence
        current_page: Requested 1-based page
        page_size: Items per page

    Returns:
        Slice of ``items`` for the page
    """
    if page_size < 1:
        return items
    page = clamp_page(current_page, get_total_pages(len(items), page_size))
    start = (page - 1) * page_size
    return items[start : start + page_size]


def get_item_range(
    current_page: int, page_size: int, total_items: int
) -> Tuple[int, int]:
    """
    First and last 1-based item numbers shown on a page.

    Returns ``(0, 0)`` for an empty result set.
    """
    if total_items <= 0 or page_size < 1:
        return (0, 0)
    start = min((current_page - 1) * page_size + 1, total_items)
    end = min(current_page * page_size, total_items)
    return (start, end)


def get_page_numbers(
    current_page: int,
    total_pages: int,
    max_buttons: int = DEFAULT_MAX_PAGE_BUTTONS,
) -> List[PageItem]:
    """
    Compute the page buttons to show, collapsing skipped runs into ellipses.

    The first and last page are always shown. Around the current page a
    window of ``(max_buttons - 3) // 2`` pages on each side is kept; near
    either end the window is anchored to that end so the button count stays
    stable.

    Example:
        get_page_numbers(10, 20, 7)
        -> [1, ELLIPSIS_START, 8, 9, 10, 11, 12, ELLIPSIS_END, 20]

    Args:
        current_page: 1-based current page
        total_pages: Total number of pages
        max_buttons: Display budget for page buttons (default: 7)

    Returns:
        List of page numbers and PageEllipsis markers

    Raises:
        ValueError: If max_buttons is below MIN_PAGE_BUTTONS
    """
    if max_buttons < MIN_PAGE_BUTTONS:
        raise ValueError(
            f"max_buttons must be >= {MIN_PAGE_BUTTONS}, got {max_buttons}"
        )
    if total_pages <= max_buttons:
        return list(range(1, total_pages + 1))

    half = (max_buttons - 3) // 2
    pages: List[PageItem] = [1]

    start = max(2, current_page - half)
    end = min(total_pages - 1, current_page + half)

    # Near the beginning
    if current_page <= half + 2:
        end = min(total_pages - 1, max_buttons - 2)

    # Near the end
    if current_page >= total_pages - half - 1:
        start = max(2, total_pages - max_buttons + 3)

    if start > 2:
        pages.append(ELLIPSIS_START)

    pages.extend(range(start, end + 1))

    if end < total_pages - 1:
        pages.append(ELLIPSIS_END)

    if total_pages > 1:
        pages.append(total_pages)

    return pages
