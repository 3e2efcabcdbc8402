"""Exceptions raised by the table engine.

The orchestrator itself never raises for bad configuration; it degrades the
affected feature to pass-through instead. These exceptions surface only from
the strict helpers and from the query collaborator.
"""

from typing import Any


class TableConfigError(ValueError):
    """Raised by strict config coercion when a feature config is malformed.

    ``PaginatedTable`` uses the lenient path and never sees this error; it is
    meant for callers that want to validate configs up front (e.g. in tests or
    when building configs from user-editable settings).
    """

    def __init__(self, feature: str, message: str):
        self.feature = feature
        super().__init__(f"Invalid {feature} configuration: {message}")


class QueryError(RuntimeError):
    """Wraps an exception raised by a query function."""

    def __init__(self, message: str, query_key: Any = None):
        self.query_key = query_key
        super().__init__(message)
