"""
Docmonitor Tables - Generic data table engine for Streamlit dashboards.

This package provides filtering, single and multi-column sorting, pagination
and row selection over arbitrary rows, computed locally (client mode) or
delegated to the data owner (server mode), plus a Streamlit renderer.
"""

from .components.columns import (
    boolean_column,
    columns_from_schema,
    date_column,
    datetime_column,
    numeric_column,
    status_column,
    text_column,
)
from .components.table import PaginatedTable, TableView
from .controllers import (
    MultiSortController,
    PaginationController,
    SelectionController,
    SingleSortController,
)
from .core.config import (
    EmptyStateAction,
    EmptyStateConfig,
    ErrorState,
    FilterConfig,
    MultiSortConfig,
    PaginationConfig,
    RowActionsConfig,
    SelectionConfig,
    SingleSortConfig,
)
from .core.errors import QueryError, TableConfigError
from .core.query import ApiQuery, QueryResult
from .core.state import TableStateStore
from .core.types import Column, SortEntry
from .rendering.streamlit_table import render_table, view_to_dataframe
from .sources.frame import FrameSource, PageResult, rows_from_frame

__version__ = "0.1.0"

__all__ = [
    # Core
    "Column",
    "SortEntry",
    "TableStateStore",
    "ApiQuery",
    "QueryResult",
    "TableConfigError",
    "QueryError",
    # Configs
    "FilterConfig",
    "SingleSortConfig",
    "MultiSortConfig",
    "PaginationConfig",
    "SelectionConfig",
    "RowActionsConfig",
    "EmptyStateAction",
    "EmptyStateConfig",
    "ErrorState",
    # Components
    "PaginatedTable",
    "TableView",
    "SingleSortController",
    "MultiSortController",
    "PaginationController",
    "SelectionController",
    "text_column",
    "numeric_column",
    "boolean_column",
    "date_column",
    "datetime_column",
    "status_column",
    "columns_from_schema",
    # Data sources
    "FrameSource",
    "PageResult",
    "rows_from_frame",
    # Rendering
    "render_table",
    "view_to_dataframe",
]
