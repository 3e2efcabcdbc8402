"""Table orchestrator and column helpers."""

from .columns import (
    boolean_column,
    columns_from_schema,
    date_column,
    datetime_column,
    format_display_date,
    format_display_datetime,
    numeric_column,
    parse_datetime,
    status_column,
    text_column,
)
from .table import PaginatedTable, TableView

__all__ = [
    "PaginatedTable",
    "TableView",
    "text_column",
    "numeric_column",
    "boolean_column",
    "date_column",
    "datetime_column",
    "status_column",
    "columns_from_schema",
    "parse_datetime",
    "format_display_date",
    "format_display_datetime",
]
