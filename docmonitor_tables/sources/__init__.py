"""Data sources for server-mode tables."""

from .frame import FrameSource, PageResult, column_expr, rows_from_frame

__all__ = [
    "FrameSource",
    "PageResult",
    "column_expr",
    "rows_from_frame",
]
