"""Streamlit session-backed storage for table view state.

Streamlit re-runs the whole script on every interaction, so a table built in
the script loses its filter, sort, page and selection unless they live in
``st.session_state``. ``TableStateStore`` keeps them there (for the current
browser session only) and hands out setters to wire into feature callbacks.
"""

from typing import Any, Callable, Dict, Optional

# Module-level default store
_default_store: Optional["TableStateStore"] = None


def get_default_store() -> "TableStateStore":
    """
    Get or create the default shared TableStateStore.

    Returns:
        The default TableStateStore instance
    """
    global _default_store
    if _default_store is None:
        _default_store = TableStateStore()
    return _default_store


def reset_default_store() -> None:
    """Reset the default store (useful for testing)."""
    global _default_store
    _default_store = None


class TableStateStore:
    """
    Keeps per-table view state in Streamlit's session_state.

    Values are namespaced by table id. A counter is incremented on every
    change so renderers can tell whether anything moved since the last run.

    Example:
        store = TableStateStore()
        table = PaginatedTable(
            rows,
            columns,
            filter=FilterConfig(
                value=store.get("requests", "filter", ""),
                on_change=store.setter("requests", "filter"),
            ),
        )
    """

    def __init__(self, session_key: str = "docmonitor_tables_state"):
        """
        Initialize the store.

        Args:
            session_key: Key to use in Streamlit session_state. Use different
                keys for independent groups of tables.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        """Ensure session state is initialized."""
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "tables": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        """Get the internal state dict from session_state."""
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def counter(self) -> int:
        """Get the current change counter."""
        return self._state["counter"]

    def _table(self, table_id: str) -> Dict[str, Any]:
        return self._state["tables"].setdefault(table_id, {})

    def get(self, table_id: str, name: str, default: Any = None) -> Any:
        """
        Get a stored value.

        Args:
            table_id: Identifier of the table
            name: State name (e.g. 'filter', 'page', 'sorts')
            default: Returned when nothing is stored

        Returns:
            The stored value or ``default``
        """
        return self._state["tables"].get(table_id, {}).get(name, default)

    def set(self, table_id: str, name: str, value: Any) -> bool:
        """
        Store a value.

        Returns:
            True if the value changed, False otherwise
        """
        table = self._table(table_id)
        if name in table and table[name] == value:
            return False
        table[name] = value
        self._state["counter"] += 1
        return True

    def setter(self, table_id: str, name: str) -> Callable[[Any], None]:
        """Return a one-argument callback storing its argument under ``name``."""

        def _set(value: Any) -> None:
            self.set(table_id, name, value)

        return _set

    def clear_table(self, table_id: str) -> bool:
        """
        Forget all state of one table.

        Returns:
            True if state was cleared, False if there was none
        """
        if table_id in self._state["tables"]:
            del self._state["tables"][table_id]
            self._state["counter"] += 1
            return True
        return False

    def get_table_state(self, table_id: str) -> Dict[str, Any]:
        """Return a copy of all state stored for one table."""
        return dict(self._state["tables"].get(table_id, {}))

    def clear(self) -> None:
        """Clear all tables and reset counter."""
        self._state["tables"] = {}
        self._state["counter"] = 0

    def __repr__(self) -> str:
        return (
            f"TableStateStore(session_key='{self._session_key}', "
            f"counter={self.counter}, "
            f"tables={sorted(self._state['tables'])})"
        )
