"""Pytest configuration and shared fixtures for docmonitor-tables tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import polars as pl
import pytest

from docmonitor_tables.core.query import clear_query_cache
from docmonitor_tables.core.state import reset_default_store
from docmonitor_tables.core.types import Column


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing.

    This fixture patches st.session_state to allow testing the state store
    without running a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state
    reset_default_store()


@pytest.fixture(autouse=True)
def _clear_query_cache():
    """Isolate the shared query result cache between tests."""
    clear_query_cache()
    yield
    clear_query_cache()


@pytest.fixture
def request_rows() -> List[Dict[str, Any]]:
    """Document requests as returned by the monitoring API."""
    return [
        {
            "id": 1,
            "reference": "REQ-alpha",
            "retries": 0,
            "status": {"code": "PENDING", "label": "Pending"},
            "created": "2024-03-05T14:30:00Z",
        },
        {
            "id": 2,
            "reference": "REQ-bravo",
            "retries": 3,
            "status": {"code": "FAILED", "label": "Failed"},
            "created": "2024-03-01T09:00:00Z",
        },
        {
            "id": 3,
            "reference": "req-charlie",
            "retries": None,
            "status": {"code": "DONE", "label": "Completed"},
            "created": None,
        },
        {
            "id": 4,
            "reference": "REQ-delta",
            "retries": 1,
            "status": {"code": "PENDING", "label": "Pending"},
            "created": "2024-02-20T08:15:00Z",
        },
        {
            "id": 5,
            "reference": "REQ-echo",
            "retries": 3,
            "status": {"code": "FAILED", "label": "Failed"},
            "created": "2024-03-07T18:45:00Z",
        },
    ]


@pytest.fixture
def request_columns() -> List[Column]:
    """Sortable columns over the request rows, including a nested key."""
    return [
        Column("id", "ID", sortable=True),
        Column("reference", "Reference", sortable=True),
        Column("retries", "Retries", sortable=True),
        Column("status.label", "Status", sortable=True),
    ]


@pytest.fixture
def numbered_rows() -> List[Dict[str, Any]]:
    """95 rows with ids 1..95."""
    return [{"id": i, "name": f"row {i:02d}"} for i in range(1, 96)]


@pytest.fixture
def request_frame(request_rows) -> pl.LazyFrame:
    """Request rows as a polars LazyFrame with a struct status column."""
    return pl.DataFrame(request_rows).lazy()
