"""Helpers for building consistently formatted columns."""

from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional, Union

import polars as pl

from ..core.types import Column
from ..processing.compare import is_nullish

DEFAULT_FALLBACK = "-"
DEFAULT_STATUS_WIDTH = "140px"

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip

_NUMERIC_DTYPES = (
    pl.Int8,
    pl.Int16,
    pl.Int32,
    pl.Int64,
    pl.UInt8,
    pl.UInt16,
    pl.UInt32,
    pl.UInt64,
    pl.Float32,
    pl.Float64,
)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a value into a timezone-aware UTC datetime.

    Accepts datetime and date objects, ISO 8601 strings (a trailing ``Z`` is
    understood) and epoch timestamps in milliseconds. Naive values are taken
    to be UTC. Empty values, including ``0``, count as missing.

    Returns:
        The parsed datetime, or None if the value is empty or unparseable
    """
    if is_nullish(value) or isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)) and not value:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_display_date(value: Any, fallback: str = DEFAULT_FALLBACK) -> str:
    """Format a date like ``"28 Dec 2025"`` (UTC)."""
    parsed = parse_datetime(value)
    if parsed is None:
        return fallback
    return f"{parsed.day:02d} {_MONTHS[parsed.month - 1]} {parsed.year}"


def format_display_datetime(value: Any, fallback: str = DEFAULT_FALLBACK) -> str:
    """Format a timestamp like ``"28 Dec 2025, 14:30"`` (UTC)."""
    parsed = parse_datetime(value)
    if parsed is None:
        return fallback
    return (
        f"{format_display_date(parsed)}, {parsed.hour:02d}:{parsed.minute:02d}"
    )


def text_column(
    key: str,
    header: Optional[str] = None,
    width: Optional[str] = None,
    sortable: bool = True,
) -> Column:
    """Plain text column."""
    return Column(key=key, header=header, sortable=sortable, width=width)


def numeric_column(
    key: str,
    header: Optional[str] = None,
    width: Optional[str] = None,
    sortable: bool = True,
    fallback: str = DEFAULT_FALLBACK,
) -> Column:
    """Right-aligned numeric column showing ``fallback`` for missing values."""

    def render(value: Any, row: Any) -> str:
        if is_nullish(value):
            return fallback
        return str(value)

    return Column(
        key=key,
        header=header,
        sortable=sortable,
        width=width,
        render=render,
        align="right",
    )


def boolean_column(
    key: str,
    header: Optional[str] = None,
    width: Optional[str] = None,
    sortable: bool = True,
    true_label: str = "Yes",
    false_label: str = "No",
) -> Column:
    """Column rendering truthy values as ``true_label`` and the rest as ``false_label``."""

    def render(value: Any, row: Any) -> str:
        return true_label if value and not is_nullish(value) else false_label

    return Column(key=key, header=header, sortable=sortable, width=width, render=render)


def date_column(
    key: str,
    header: Optional[str] = None,
    width: Optional[str] = None,
    sortable: bool = True,
    fallback: str = DEFAULT_FALLBACK,
) -> Column:
    """
    Date-time column formatted like ``"05 Mar 2024, 14:30"`` in UTC.

    Args:
        key: Dot path of the value
        header: Display label
        width: Presentation width hint
        sortable: Whether the header toggles sorting (default: True)
        fallback: Shown for missing or unparseable values (default: '-')

    Returns:
        Column descriptor
    """

    def render(value: Any, row: Any) -> str:
        return format_display_datetime(value, fallback)

    return Column(key=key, header=header, sortable=sortable, width=width, render=render)


datetime_column = date_column


def status_column(
    key: str,
    get_status: Callable[[Any], Any],
    header: Optional[str] = None,
    width: str = DEFAULT_STATUS_WIDTH,
    sortable: bool = True,
    get_description: Optional[Callable[[Any], Any]] = None,
) -> Column:
    """
    Status column whose text is derived from the whole row.

    Sorting and filtering still use the raw value at ``key``; ``get_status``
    only affects what is shown.

    Args:
        key: Dot path used for sorting and filtering
        get_status: Returns the status label for a row
        header: Display label
        width: Presentation width hint (default: '140px')
        sortable: Whether the header toggles sorting (default: True)
        get_description: Optional row -> description appended in parentheses

    Returns:
        Column descriptor
    """

    def render(value: Any, row: Any) -> str:
        status = get_status(row)
        text = DEFAULT_FALLBACK if is_nullish(status) else str(status)
        if get_description is not None:
            description = get_description(row)
            if description:
                text = f"{text} ({description})"
        return text

    return Column(key=key, header=header, sortable=sortable, width=width, render=render)


def columns_from_schema(
    data: Union[pl.LazyFrame, pl.DataFrame], sortable: bool = True
) -> List[Column]:
    """
    Auto-generate columns from a polars schema.

    Numeric columns are right-aligned with a missing-value fallback, booleans
    shown as Yes/No, temporal columns formatted as UTC date-times and
    everything else as text. Headers are the column names title-cased.

    Args:
        data: Polars LazyFrame or DataFrame
        sortable: Whether the generated columns are sortable

    Returns:
        One Column per schema field, in schema order
    """
    schema = data.collect_schema()
    columns: List[Column] = []
    for name, dtype in zip(schema.names(), schema.dtypes()):
        header = name.replace("_", " ").title()
        if dtype in _NUMERIC_DTYPES:
            columns.append(numeric_column(name, header, sortable=sortable))
        elif dtype == pl.Boolean:
            columns.append(boolean_column(name, header, sortable=sortable))
        elif dtype in (pl.Date, pl.Datetime):
            columns.append(date_column(name, header, sortable=sortable))
        else:
            columns.append(text_column(name, header, sortable=sortable))
    return columns
