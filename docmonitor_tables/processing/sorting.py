"""Single- and multi-column row sorting built on ``compare_values``."""

import functools
from typing import Callable, List, Optional, Sequence, TypeVar

from ..core.types import SORT_DIRECTIONS, SortEntry
from .compare import compare_with_direction, get_nested_value

T = TypeVar("T")


def ordered_by_priority(sorts: Sequence[SortEntry]) -> List[SortEntry]:
    """Return sort entries in ascending priority order (0 first)."""
    return sorted(sorts, key=lambda entry: entry.priority)


def make_row_comparator(sorts: Sequence[SortEntry]) -> Callable[[T, T], int]:
    """
    Build a ``cmp(a, b)`` function for a multi-column sort.

    Entries are applied in ascending priority; the first entry whose values
    differ decides the order. Rows tying on every entry compare equal.

    Args:
        sorts: Sort entries (any order; priorities decide precedence)

    Returns:
        Comparison function suitable for ``functools.cmp_to_key``
    """
    entries = [e for e in ordered_by_priority(sorts) if e.direction in SORT_DIRECTIONS]

    def compare_rows(a: T, b: T) -> int:
        for entry in entries:
            result = compare_with_direction(
                get_nested_value(a, entry.column),
                get_nested_value(b, entry.column),
                entry.direction,
            )
            if result != 0:
                return result
        return 0

    return compare_rows


def sort_rows_multi(rows: Sequence[T], sorts: Sequence[SortEntry]) -> Sequence[T]:
    """
    Sort rows by several columns.

    Python's sort is stable, so rows tying on every entry keep their input
    order. With no entries the input is returned unchanged.

    Args:
        rows: Rows to sort
        sorts: Priority-tagged sort entries

    Returns:
        New sorted list, or ``rows`` itself when there is nothing to sort by
    """
    if not sorts:
        return rows
    return sorted(rows, key=functools.cmp_to_key(make_row_comparator(sorts)))


def sort_rows(
    rows: Sequence[T], column: Optional[str], direction: Optional[str]
) -> Sequence[T]:
    """
    Sort rows by one column.

    Returns ``rows`` unchanged when no column or direction is active.
    """
    if not column or direction not in SORT_DIRECTIONS:
        return rows
    return sort_rows_multi(rows, [SortEntry(column, direction, 0)])
