"""Stateful controllers for sorting, paging and selection."""

from .multi_sort import MultiSortController
from .pagination import PaginationController
from .selection import SelectionController
from .single_sort import SingleSortController

__all__ = [
    "SingleSortController",
    "MultiSortController",
    "PaginationController",
    "SelectionController",
]
