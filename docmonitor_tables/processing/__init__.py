"""Pure row processing: comparison, filtering, sorting and paging."""

from .compare import (
    compare_values,
    compare_with_direction,
    format_value,
    get_nested_value,
    is_nullish,
)
from .filtering import filter_rows
from .pagination import (
    clamp_page,
    get_item_range,
    get_page_numbers,
    get_total_pages,
    slice_page,
)
from .sorting import sort_rows, sort_rows_multi

__all__ = [
    "compare_values",
    "compare_with_direction",
    "format_value",
    "get_nested_value",
    "is_nullish",
    "filter_rows",
    "sort_rows",
    "sort_rows_multi",
    "get_total_pages",
    "clamp_page",
    "slice_page",
    "get_item_range",
    "get_page_numbers",
]
