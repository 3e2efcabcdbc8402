"""Streamlit renderer for PaginatedTable."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from ..core.types import Column, PageEllipsis
from ..processing.compare import format_value, get_nested_value

if TYPE_CHECKING:
    from ..components.table import PaginatedTable, TableView

logger = logging.getLogger(__name__)

_SORT_ARROWS = {"asc": "↑", "desc": "↓"}


def cell_value(row: Any, column: Column) -> Any:
    """Display value of one cell: the column's render output or the formatted value."""
    value = get_nested_value(row, column.key)
    if column.render is not None:
        return column.render(value, row)
    return format_value(value)


def view_to_dataframe(view: "TableView") -> pd.DataFrame:
    """
    Convert a TableView's current page into a display DataFrame.

    Args:
        view: The table view to convert

    Returns:
        pandas DataFrame with one column per display column, labelled by header
    """
    labels = [column.label for column in view.columns]
    records: List[Dict[str, Any]] = [
        {column.label: cell_value(row, column) for column in view.columns}
        for row in view.rows
    ]
    return pd.DataFrame(records, columns=labels)


def header_label(view: "TableView", column: Column) -> str:
    """Header text with direction arrow and, for multi-column sorts, position."""
    direction = view.sort_directions.get(column.key)
    if direction is None:
        return column.label
    label = f"{column.label} {_SORT_ARROWS[direction]}"
    active = sum(1 for d in view.sort_directions.values() if d is not None)
    if active > 1:
        label = f"{label} {view.sort_indexes.get(column.key, -1)}"
    return label


def _render_filter(table: "PaginatedTable", view: "TableView", key: str) -> bool:
    config = table.filter_config
    if config is None:
        return False
    value = st.text_input(
        "Search",
        value=view.filter_value,
        placeholder=config.placeholder,
        disabled=config.disabled,
        key=f"{key}_filter",
        label_visibility="collapsed",
    )
    changed = False
    if value is not None and value != view.filter_value:
        table.change_filter(value)
        changed = True
    if config.on_search is not None and st.button(
        "Search", key=f"{key}_search", disabled=config.disabled
    ):
        config.on_search()
    return changed


def _render_sort_headers(table: "PaginatedTable", view: "TableView", key: str) -> bool:
    if table.sort_config is None:
        return False
    sortable = [c for c in view.columns if c.sortable]
    if not sortable:
        return False
    changed = False
    for container, column in zip(st.columns(len(sortable)), sortable):
        if container.button(header_label(view, column), key=f"{key}_sort_{column.key}"):
            table.click_header(column.key)
            changed = True
    return changed


def _render_selection(table: "PaginatedTable", view: "TableView", key: str) -> bool:
    config = table.selection_config
    if config is None or not view.rows:
        return False

    changed = False
    select_all = st.checkbox(
        f"Select all ({len(view.selected_ids)} selected)",
        value=view.all_selected,
        key=f"{key}_select_all",
    )
    if select_all != view.all_selected:
        table.toggle_select_all()
        changed = True

    selected = set(view.selected_ids)
    for row_key in view.row_keys:
        is_selected = row_key in selected
        checked = st.checkbox(
            str(row_key), value=is_selected, key=f"{key}_select_{row_key}"
        )
        if checked != is_selected:
            table.toggle_row(row_key)
            changed = True

    if config.render_bulk_actions is not None and view.selected_ids:
        config.render_bulk_actions(list(view.selected_ids))
    return changed


def _render_pagination(table: "PaginatedTable", view: "TableView", key: str) -> bool:
    config = table.pagination_config
    if config is None:
        return False

    changed = False
    if config.show_info:
        start, end = view.item_range
        st.caption(f"Showing {start} to {end} of {view.total_items} results")

    slots = st.columns(len(view.page_numbers) + 2)
    if slots[0].button(
        "‹", key=f"{key}_page_prev", disabled=not view.has_previous_page
    ):
        changed = table.change_page(view.current_page - 1) is not None
    for slot, item in zip(slots[1:-1], view.page_numbers):
        if isinstance(item, PageEllipsis):
            slot.markdown(str(item))
            continue
        if slot.button(
            str(item),
            key=f"{key}_page_{item}",
            disabled=item == view.current_page,
        ):
            changed = table.change_page(item) is not None or changed
    if slots[-1].button("›", key=f"{key}_page_next", disabled=not view.has_next_page):
        changed = table.change_page(view.current_page + 1) is not None or changed

    if config.show_page_size_selector:
        options = list(config.page_size_options)
        if view.page_size not in options:
            options = sorted(set(options) | {view.page_size})
        size = st.selectbox(
            "Rows per page",
            options,
            index=options.index(view.page_size),
            key=f"{key}_page_size",
        )
        if size is not None and size != view.page_size:
            table.change_page_size(int(size))
            changed = True
    return changed


def _render_empty_state(view: "TableView", key: str) -> bool:
    empty_state = view.empty_state
    st.info(empty_state.message)
    if empty_state.description:
        st.caption(empty_state.description)
    action = empty_state.action
    if action is not None and st.button(action.label, key=f"{key}_empty_action"):
        action.on_click()
        return True
    return False


def render_table(
    table: "PaginatedTable",
    key: str,
    height: Optional[int] = None,
) -> "TableView":
    """
    Render a table in Streamlit.

    This function:
    1. Computes the current view
    2. Draws the search box, its optional Search button and sortable headers
    3. Draws loading, error or empty states, or the current page
    4. Draws selection checkboxes, bulk actions and pagination controls
    5. Dispatches widget changes to the table and triggers st.rerun()

    Args:
        table: The table to render
        key: Unique key prefix for the table's widgets
        height: Optional height in pixels for the data grid

    Returns:
        The TableView that was drawn
    """
    view = table.view()
    changed = _render_filter(table, view, key)
    changed = _render_sort_headers(table, view, key) or changed

    if view.loading:
        st.info("Loading...")
    elif view.error is not None:
        st.error(view.error.message)
        if view.error.on_retry is not None and st.button(
            "Retry", key=f"{key}_retry"
        ):
            table.retry()
    elif view.is_empty:
        changed = _render_empty_state(view, key) or changed
    else:
        kwargs: Dict[str, Any] = {"hide_index": True, "use_container_width": True}
        if height is not None:
            kwargs["height"] = height
        st.dataframe(view_to_dataframe(view), **kwargs)

    changed = _render_selection(table, view, key) or changed
    changed = _render_pagination(table, view, key) or changed

    if changed:
        logger.debug("Table %s changed; rerunning", key)
        st.rerun()
    return view
