"""Polars-backed data source applying filter, sort and paging to a frame.

Use this on the data-owning side of a server-mode table: the table emits
filter/sort/page callbacks, the caller stores them and asks ``FrameSource``
for the matching page. Everything stays lazy until the final page slice is
collected.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
import polars as pl

from ..core.config import DEFAULT_PAGE_SIZE
from ..core.types import Column, SortEntry
from ..processing.pagination import clamp_page, get_total_pages
from ..processing.sorting import ordered_by_priority

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """One page fetched from a FrameSource."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    total_items: int = 0
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return get_total_pages(self.total_items, self.page_size)

    def to_pandas(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows)


def rows_from_frame(
    data: Union[pl.LazyFrame, pl.DataFrame, pd.DataFrame],
) -> List[Dict[str, Any]]:
    """
    Convert a polars or pandas frame into row dicts for client-mode tables.

    Struct columns become nested dicts, so dot-path column keys keep working.

    Args:
        data: Polars LazyFrame/DataFrame or pandas DataFrame

    Returns:
        List of row dicts

    Raises:
        TypeError: For unsupported input types
    """
    if isinstance(data, pl.LazyFrame):
        data = data.collect()
    if isinstance(data, pl.DataFrame):
        return data.to_dicts()
    if isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")
    raise TypeError(f"Unsupported frame type: {type(data).__name__}")


def _resolve_dtype(schema: pl.Schema, key: str) -> Optional[pl.DataType]:
    """Walk a dot path through struct fields; None if the path does not exist."""
    first, *rest = key.split(".")
    if first not in schema:
        return None
    dtype = schema[first]
    for segment in rest:
        if not isinstance(dtype, pl.Struct):
            return None
        fields = {f.name: f.dtype for f in dtype.fields}
        if segment not in fields:
            return None
        dtype = fields[segment]
    return dtype


def column_expr(key: str) -> pl.Expr:
    """Expression selecting a dot-path column (struct fields for nested keys)."""
    first, *rest = key.split(".")
    expr = pl.col(first)
    for segment in rest:
        expr = expr.struct.field(segment)
    return expr


class FrameSource:
    """
    Runs filter -> sort -> paginate against a polars frame.

    Example:
        source = FrameSource(pl.scan_parquet("requests.parquet"), columns)
        page = source.fetch(query="pending", sorts=sorts, page=2, page_size=20)
        table = PaginatedTable(
            page.rows,
            columns,
            pagination=PaginationConfig(
                mode="server",
                current_page=page.current_page,
                total_items=page.total_items,
                page_size=page.page_size,
                on_page_change=store.setter("requests", "page"),
            ),
        )
    """

    def __init__(
        self,
        data: Union[pl.LazyFrame, pl.DataFrame],
        columns: Sequence[Column],
    ):
        """
        Initialize the source.

        Args:
            data: Polars LazyFrame or DataFrame holding every row
            columns: Column descriptors; their keys are searched by ``filter``
        """
        if isinstance(data, pl.DataFrame):
            data = data.lazy()
        self._data = data
        self._columns = list(columns)
        self._schema = data.collect_schema()

    @property
    def data(self) -> pl.LazyFrame:
        return self._data

    def filter(self, query: str) -> pl.LazyFrame:
        """
        Keep rows where any searchable column contains ``query``.

        Matching is a case-insensitive literal substring test on the values
        cast to strings. Columns missing from the schema or holding nested
        values are skipped.
        """
        if not query or not query.strip():
            return self._data

        needle = query.lower()
        conditions = []
        for column in self._columns:
            dtype = _resolve_dtype(self._schema, column.key)
            if dtype is None:
                logger.debug("Column %r not in schema; not searched", column.key)
                continue
            if dtype.is_nested() or dtype == pl.Object:
                continue
            conditions.append(
                column_expr(column.key)
                .cast(pl.String)
                .str.to_lowercase()
                .str.contains(needle, literal=True)
                .fill_null(False)
            )

        if not conditions:
            return self._data.head(0)
        return self._data.filter(pl.any_horizontal(conditions))

    def sort(self, data: pl.LazyFrame, sorts: Sequence[SortEntry]) -> pl.LazyFrame:
        """
        Sort by priority-ordered entries, nulls last, strings case-insensitive.

        Entries naming columns that are not in the schema are ignored.
        """
        exprs = []
        descending = []
        for entry in ordered_by_priority(sorts):
            dtype = _resolve_dtype(self._schema, entry.column)
            if dtype is None:
                logger.debug("Ignoring sort on unknown column %r", entry.column)
                continue
            expr = column_expr(entry.column)
            if dtype == pl.String:
                expr = expr.str.to_lowercase()
            exprs.append(expr)
            descending.append(entry.direction == "desc")

        if not exprs:
            return data
        return data.sort(
            exprs, descending=descending, nulls_last=True, maintain_order=True
        )

    def count(self, data: pl.LazyFrame) -> int:
        return data.select(pl.len()).collect().item()

    def fetch(
        self,
        query: str = "",
        sorts: Sequence[SortEntry] = (),
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> PageResult:
        """
        Fetch one page.

        Args:
            query: Free-text search term
            sorts: Sort entries (priority 0 is primary)
            page: Requested 1-based page, clamped into range
            page_size: Rows per page

        Returns:
            PageResult with the page rows and the total match count
        """
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        data = self.sort(self.filter(query), sorts)
        total_items = self.count(data)
        current_page = clamp_page(page, get_total_pages(total_items, page_size))
        offset = (current_page - 1) * page_size
        rows = data.slice(offset, page_size).collect().to_dicts()

        logger.debug(
            "Fetched page %d (%d rows) of %d matching rows",
            current_page,
            len(rows),
            total_items,
        )
        return PageResult(
            rows=rows,
            total_items=total_items,
            current_page=current_page,
            page_size=page_size,
        )

    def __repr__(self) -> str:
        return f"FrameSource(columns={[c.key for c in self._columns]})"
