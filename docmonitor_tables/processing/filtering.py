"""Free-text row filtering."""

from typing import Iterable, List, Sequence, TypeVar, Union

from ..core.types import Column
from .compare import format_value, get_nested_value, is_nullish

T = TypeVar("T")


def row_matches(row: T, needle: str, columns: Iterable[Column]) -> bool:
    """
    Check if any declared column of a row contains the (lower-cased) needle.

    Args:
        row: The row to test
        needle: Already lower-cased search term
        columns: Column descriptors whose values are searched

    Returns:
        True if at least one column value contains the needle
    """
    for column in columns:
        value = get_nested_value(row, column.key)
        if is_nullish(value):
            continue
        if needle in format_value(value).lower():
            return True
    return False


def filter_rows(
    rows: Sequence[T],
    query: str,
    columns: Sequence[Column],
) -> Union[Sequence[T], List[T]]:
    """
    Keep rows where any column value contains the query, case-insensitively.

    An empty or whitespace-only query returns ``rows`` itself (same object),
    so callers can cheaply detect that nothing was filtered.

    Only declared columns are searched and the column ``render`` transform is
    ignored: matching always runs on the raw extracted value.

    Args:
        rows: Rows to filter
        query: Free-text search term
        columns: Column descriptors to search

    Returns:
        Either the input sequence unchanged or a new list of matching rows
    """
    if not query or not query.strip():
        return rows

    needle = query.lower()
    return [row for row in rows if row_matches(row, needle, columns)]
