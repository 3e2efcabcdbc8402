"""Streamlit rendering for tables."""

from .streamlit_table import cell_value, header_label, render_table, view_to_dataframe

__all__ = [
    "render_table",
    "view_to_dataframe",
    "cell_value",
    "header_label",
]
