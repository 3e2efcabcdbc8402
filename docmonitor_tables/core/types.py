"""Shared value types for the table engine."""

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional, Tuple, TypeVar, Union

T = TypeVar("T")

RowKey = Union[str, int]
RowKeyExtractor = Union[str, Callable[[Any], RowKey]]

OperatingMode = Literal["client", "server"]
SortDirection = Literal["asc", "desc"]

CLIENT: OperatingMode = "client"
SERVER: OperatingMode = "server"
OPERATING_MODES: Tuple[str, ...] = (CLIENT, SERVER)
SORT_DIRECTIONS: Tuple[str, ...] = ("asc", "desc")


def opposite_direction(direction: str) -> str:
    """Return the other sort direction."""
    return "desc" if direction == "asc" else "asc"


@dataclass(frozen=True)
class Column:
    """
    Column descriptor.

    Attributes:
        key: Dot path into the row (e.g. ``"status.ref_data_value"``)
        header: Display label. Defaults to the key title-cased.
        sortable: Whether clicking the header toggles sorting
        width: Presentation width hint (e.g. ``"120px"``)
        render: Optional ``render(value, row)`` display transform. Only affects
            presentation, never comparison or filtering.
        align: Presentation alignment hint ('left', 'center', 'right')
    """

    key: str
    header: Optional[str] = None
    sortable: bool = False
    width: Optional[str] = None
    render: Optional[Callable[[Any, Any], Any]] = field(default=None, compare=False)
    align: Optional[str] = None

    @property
    def label(self) -> str:
        if self.header is not None:
            return self.header
        return self.key.split(".")[-1].replace("_", " ").title()


@dataclass(frozen=True)
class SingleSortState:
    """Current single-column sort. ``column`` is '' or None when unsorted."""

    column: Optional[str] = None
    direction: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return bool(self.column) and self.direction in SORT_DIRECTIONS


UNSORTED = SingleSortState(column="", direction=None)


@dataclass(frozen=True)
class SortEntry:
    """One priority-tagged entry of a multi-column sort (0 = primary)."""

    column: str
    direction: str = "desc"
    priority: int = 0


@dataclass(frozen=True)
class PaginationState:
    """Pagination position. ``total_pages`` is never below 1."""

    current_page: int = 1
    page_size: int = 10
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        from ..processing.pagination import get_total_pages

        return get_total_pages(self.total_items, self.page_size)


@dataclass(frozen=True)
class PageEllipsis:
    """Marker for a collapsed run of page buttons."""

    position: str

    def __str__(self) -> str:
        return "..."


ELLIPSIS_START = PageEllipsis("start")
ELLIPSIS_END = PageEllipsis("end")

PageItem = Union[int, PageEllipsis]
