"""Tests for the Streamlit table renderer.

Streamlit is replaced with a MagicMock whose widgets return configurable
values, so render_table can be driven without a running app.
"""

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from docmonitor_tables.components.table import PaginatedTable
from docmonitor_tables.core.config import (
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
from docmonitor_tables.core.types import Column, SortEntry
from docmonitor_tables.rendering.streamlit_table import (
    header_label,
    render_table,
    view_to_dataframe,
)

COLUMNS = [Column("id", "ID", sortable=True), Column("name")]


def make_st(pressed=(), text=None, checked=(), select=None) -> MagicMock:
    """
    Build a Streamlit mock.

    Args:
        pressed: Widget keys of buttons reported as clicked
        text: Value returned by text_input (None echoes the current value)
        checked: Widget keys of checkboxes the user flipped
        select: Value returned by selectbox (None keeps the current option)
    """
    st = MagicMock()

    def button(label, key=None, **kwargs):
        return key in pressed

    def columns(n):
        slots = []
        for _ in range(n):
            slot = MagicMock()
            slot.button.side_effect = button
            slots.append(slot)
        return slots

    def text_input(label, value="", **kwargs):
        return value if text is None else text

    def checkbox(label, value=False, key=None, **kwargs):
        return (not value) if key in checked else value

    def selectbox(label, options, index=0, key=None, **kwargs):
        return options[index] if select is None else select

    st.button.side_effect = button
    st.columns.side_effect = columns
    st.text_input.side_effect = text_input
    st.checkbox.side_effect = checkbox
    st.selectbox.side_effect = selectbox
    return st


def _render(table, **widgets):
    st = make_st(**widgets)
    with patch("docmonitor_tables.rendering.streamlit_table.st", st):
        view = render_table(table, key="t")
    return st, view


@pytest.fixture
def table(numbered_rows):
    return PaginatedTable(
        numbered_rows,
        COLUMNS,
        filter=FilterConfig(),
        sort=SingleSortConfig(),
        pagination=PaginationConfig(page_size=10),
        selection=SelectionConfig(),
    )


class TestViewToDataframe:
    """Tests for the pure view conversion."""

    def test_labels_and_formatting(self, request_rows):
        columns = [
            Column("id", "ID"),
            Column("status.label", "Status"),
            Column("retries", render=lambda value, row: f"{value or 0} tries"),
        ]
        view = PaginatedTable(request_rows[:3], columns).view()
        df = view_to_dataframe(view)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["ID", "Status", "Retries"]
        assert list(df["Status"]) == ["Pending", "Failed", "Completed"]
        assert list(df["Retries"]) == ["0 tries", "3 tries", "0 tries"]

    def test_actions_column(self, request_rows):
        view = PaginatedTable(
            request_rows[:2],
            [Column("id")],
            row_actions=RowActionsConfig(render=lambda row: f"open {row['id']}"),
        ).view()
        df = view_to_dataframe(view)
        assert list(df["Actions"]) == ["open 1", "open 2"]

    def test_empty_view_keeps_columns(self):
        df = view_to_dataframe(PaginatedTable([], COLUMNS).view())
        assert list(df.columns) == ["ID", "Name"]
        assert len(df) == 0


class TestHeaderLabel:
    """Tests for sort indicators in headers."""

    def test_single_sort_arrow(self, numbered_rows):
        table = PaginatedTable(
            numbered_rows, COLUMNS, sort=SingleSortConfig(column="id", direction="asc")
        )
        assert header_label(table.view(), COLUMNS[0]) == "ID ↑"

    def test_multi_sort_shows_position(self, request_rows, request_columns):
        table = PaginatedTable(
            request_rows,
            request_columns,
            sort=MultiSortConfig(
                sorts=[SortEntry("retries", "desc", 0), SortEntry("id", "asc", 1)]
            ),
        )
        view = table.view()
        assert header_label(view, request_columns[2]) == "Retries ↓ 1"
        assert header_label(view, request_columns[0]) == "ID ↑ 2"
        assert header_label(view, request_columns[1]) == "Reference"


class TestRenderTable:
    """Tests for widget dispatch."""

    def test_idle_render(self, table):
        st, view = _render(table)
        st.dataframe.assert_called_once()
        df = st.dataframe.call_args[0][0]
        assert list(df["ID"]) == [str(i) for i in range(1, 11)]
        st.rerun.assert_not_called()
        st.caption.assert_any_call("Showing 1 to 10 of 95 results")
        assert view.current_page == 1

    def test_search_input(self, table):
        st, _ = _render(table, text="row 2")
        assert table.filter_config.value == "row 2"
        st.rerun.assert_called_once()

    def test_header_click(self, table):
        st, _ = _render(table, pressed={"t_sort_id"})
        assert table.sort_config.direction == "asc"
        st.rerun.assert_called_once()

    def test_page_button(self, table):
        st, _ = _render(table, pressed={"t_page_3"})
        assert table.view().current_page == 3
        st.rerun.assert_called_once()

    def test_next_button(self, table):
        _render(table, pressed={"t_page_next"})
        assert table.view().current_page == 2

    def test_page_size_selector(self, table):
        st, _ = _render(table, select=50)
        view = table.view()
        assert view.page_size == 50
        assert view.total_pages == 2
        st.rerun.assert_called_once()

    def test_row_checkbox(self, table):
        _render(table, checked={"t_select_3"})
        assert table.view().selected_ids == [3]

    def test_select_all_checkbox(self, table):
        _render(table, checked={"t_select_all"})
        assert table.view().selected_ids == list(range(1, 11))

    def test_bulk_actions_receive_selection(self, numbered_rows):
        received = []
        table = PaginatedTable(
            numbered_rows,
            COLUMNS,
            selection=SelectionConfig(
                selected_ids=[4, 7], render_bulk_actions=received.append
            ),
        )
        _render(table)
        assert received == [[4, 7]]

    def test_empty_state(self):
        table = PaginatedTable([], COLUMNS, empty_state={"message": "No requests"})
        st, _ = _render(table)
        st.info.assert_called_once_with("No requests")
        st.dataframe.assert_not_called()

    def test_empty_state_action(self):
        created = []
        table = PaginatedTable(
            [],
            COLUMNS,
            empty_state=EmptyStateConfig(
                message="No requests",
                description="Requests appear here once submitted",
                action=EmptyStateAction("New request", lambda: created.append(1)),
            ),
        )
        st, _ = _render(table, pressed={"t_empty_action"})
        st.caption.assert_called_once_with("Requests appear here once submitted")
        assert created == [1]
        st.rerun.assert_called_once()

    def test_empty_state_action_from_dict(self):
        created = []
        table = PaginatedTable(
            [],
            COLUMNS,
            empty_state={
                "message": "No requests",
                "action": {"label": "New request", "on_click": lambda: created.append(1)},
            },
        )
        assert table.view().empty_state.action.label == "New request"
        st, _ = _render(table)
        assert created == []
        st.rerun.assert_not_called()

    def test_search_button_calls_on_search(self, numbered_rows):
        searches = []
        table = PaginatedTable(
            numbered_rows,
            COLUMNS,
            filter=FilterConfig(on_search=lambda: searches.append(1)),
        )
        _render(table)
        assert searches == []
        _render(table, pressed={"t_search"})
        assert searches == [1]

    def test_no_search_button_without_on_search(self, numbered_rows):
        table = PaginatedTable(numbered_rows, COLUMNS, filter=FilterConfig())
        st, _ = _render(table)
        keys = [call.kwargs.get("key") for call in st.button.call_args_list]
        assert "t_search" not in keys

    def test_error_with_retry(self):
        retries = []
        table = PaginatedTable(
            [], COLUMNS, error=ErrorState("Service down", on_retry=lambda: retries.append(1))
        )
        st, _ = _render(table, pressed={"t_retry"})
        st.error.assert_called_once_with("Service down")
        assert retries == [1]

    def test_loading(self, numbered_rows):
        st, _ = _render(PaginatedTable(numbered_rows, COLUMNS, loading=True))
        st.info.assert_called_once_with("Loading...")
        st.dataframe.assert_not_called()
