"""Client-side pagination over an in-memory list."""

from typing import Generic, List, Sequence, TypeVar

from ..core.config import DEFAULT_PAGE_SIZE
from ..processing.pagination import clamp_page, get_total_pages, slice_page

T = TypeVar("T")


class PaginationController(Generic[T]):
    """
    Pages through a fully loaded list (e.g. a request's batches or errors).

    Page numbers are 1-based. The stored page is clamped on read, so it stays
    valid when the item list shrinks.

    Example:
        pager = PaginationController(batches, page_size=5)
        pager.next_page()
        rows = pager.page_items
    """

    def __init__(
        self,
        items: Sequence[T] = (),
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._items: Sequence[T] = items
        self._page = page
        self._page_size = page_size

    @property
    def items(self) -> Sequence[T]:
        return self._items

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_items(self) -> int:
        return len(self._items)

    @property
    def total_pages(self) -> int:
        return get_total_pages(self.total_items, self._page_size)

    @property
    def page(self) -> int:
        """Current page, clamped into ``[1, total_pages]``."""
        return clamp_page(self._page, self.total_pages)

    @property
    def page_items(self) -> List[T]:
        return list(slice_page(self._items, self.page, self._page_size))

    @property
    def is_first_page(self) -> bool:
        return self.page == 1

    @property
    def is_last_page(self) -> bool:
        return self.page == self.total_pages

    def set_items(self, items: Sequence[T]) -> None:
        """Replace the items; the page is re-clamped on next read."""
        self._items = items

    def go_to_page(self, page: int) -> int:
        self._page = clamp_page(page, self.total_pages)
        return self._page

    def next_page(self) -> int:
        if not self.is_last_page:
            self._page = self.page + 1
        return self.page

    def previous_page(self) -> int:
        if not self.is_first_page:
            self._page = self.page - 1
        return self.page

    def first_page(self) -> int:
        self._page = 1
        return self._page

    def last_page(self) -> int:
        self._page = self.total_pages
        return self._page

    def set_page_size(self, page_size: int) -> None:
        """Change the page size and go back to the first page."""
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._page_size = page_size
        self._page = 1

    def __repr__(self) -> str:
        return (
            f"PaginationController(page={self.page}/{self.total_pages}, "
            f"page_size={self._page_size}, total_items={self.total_items})"
        )
