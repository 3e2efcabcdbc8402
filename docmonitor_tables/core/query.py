"""Synchronous data-fetch helper for feeding tables.

``ApiQuery`` wraps a zero-argument fetch function with retries, a time-based
result cache shared by query key, and success/error callbacks. Failures never
propagate to the caller; they are stored on the ``QueryResult`` so the
renderer can show an error state with a retry button.

Results are cached with ``st.cache_data``, so the cache is bounded by
``MAX_CACHED_QUERIES`` and shared across reruns of the app.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Optional, Tuple, TypeVar

import streamlit as st

from .cache import make_hashable
from .errors import QueryError

logger = logging.getLogger(__name__)

D = TypeVar("D")

DEFAULT_CACHE_TIME = 300.0  # 5 minutes
MAX_CACHE_TIME = 3600.0
MAX_CACHED_QUERIES = 100


@st.cache_data(ttl=MAX_CACHE_TIME, max_entries=MAX_CACHED_QUERIES, show_spinner=False)
def _cached_query(
    cache_key: Hashable,
    _query_fn: Callable[[], Any],
) -> Tuple[float, Any]:
    """
    Run a query once and cache its result under ``cache_key``.

    Exceptions are not cached, so a failed attempt can simply be retried.

    Args:
        cache_key: Hashed query key shared by every query using it
        _query_fn: The fetch function (underscore prefix: not hashed)

    Returns:
        Tuple of (monotonic fetch time, data)
    """
    return time.monotonic(), _query_fn()


def clear_query_cache() -> None:
    """Drop every cached query result."""
    _cached_query.clear()


@dataclass
class QueryResult(Generic[D]):
    """Snapshot of a query's state."""

    data: Optional[D] = None
    loading: bool = False
    error: Optional[QueryError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class ApiQuery(Generic[D]):
    """
    Runs a fetch function and tracks its result.

    Example:
        query = ApiQuery(lambda: client.list_requests(), query_key=("requests",))
        result = query.fetch()
        if result.error:
            st.error(str(result.error))
    """

    def __init__(
        self,
        query_fn: Callable[[], D],
        enabled: bool = True,
        on_success: Optional[Callable[[D], None]] = None,
        on_error: Optional[Callable[[QueryError], None]] = None,
        retry_count: int = 0,
        retry_delay: float = 1.0,
        cache_time: float = DEFAULT_CACHE_TIME,
        query_key: Any = None,
    ):
        """
        Initialize the query.

        Args:
            query_fn: Zero-argument callable returning picklable data
            enabled: When False, fetch() is a no-op returning the current result
            on_success: Called with the data after a successful fetch
            on_error: Called with the QueryError after the last failed attempt
            retry_count: Extra attempts after the first failure
            retry_delay: Seconds to wait between attempts
            cache_time: Seconds a result stays fresh, at most MAX_CACHE_TIME;
                0 disables caching
            query_key: Identifies the query in the shared cache. Queries
                without a key are never cached.
        """
        if retry_count < 0:
            raise ValueError(f"retry_count must be >= 0, got {retry_count}")
        if cache_time > MAX_CACHE_TIME:
            raise ValueError(
                f"cache_time must be <= {MAX_CACHE_TIME}, got {cache_time}"
            )
        self._query_fn = query_fn
        self.enabled = enabled
        self._on_success = on_success
        self._on_error = on_error
        self._retry_count = retry_count
        self._retry_delay = retry_delay
        self._cache_time = cache_time
        self._query_key = query_key
        self._result: QueryResult[D] = QueryResult()
        self._fetched_at: Optional[float] = None

    @property
    def result(self) -> QueryResult[D]:
        return self._result

    @property
    def query_key(self) -> Any:
        return self._query_key

    @property
    def _cache_key(self) -> Optional[Hashable]:
        if self._query_key is None or self._cache_time <= 0:
            return None
        if isinstance(self._query_key, tuple):
            return tuple(make_hashable(part) for part in self._query_key)
        return make_hashable(self._query_key)

    @property
    def is_stale(self) -> bool:
        """True when there is no fetched data or it is older than cache_time."""
        if self._fetched_at is None:
            return True
        return time.monotonic() - self._fetched_at >= self._cache_time

    def fetch(self) -> QueryResult[D]:
        """
        Return fresh cached data or run the query.

        Returns:
            The resulting QueryResult
        """
        if not self.enabled:
            return self._result
        return self._run()

    def refetch(self) -> QueryResult[D]:
        """Run the query ignoring any cached result."""
        key = self._cache_key
        if key is not None:
            _cached_query.clear(key, None)
        return self._run()

    def _attempt(self) -> Tuple[float, Any, bool]:
        """One attempt: (fetch time, data, whether the query function ran)."""
        key = self._cache_key
        if key is None:
            return time.monotonic(), self._query_fn(), True

        ran = []

        def load() -> Any:
            ran.append(True)
            return self._query_fn()

        fetched_at, data = _cached_query(key, load)
        if not ran and time.monotonic() - fetched_at >= self._cache_time:
            _cached_query.clear(key, None)
            fetched_at, data = _cached_query(key, load)
        return fetched_at, data, bool(ran)

    def _run(self) -> QueryResult[D]:
        self._result = QueryResult(data=self._result.data, loading=True)
        attempts = self._retry_count + 1
        last_exc: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                fetched_at, data, ran = self._attempt()
            except Exception as e:
                last_exc = e
                if attempt < attempts:
                    logger.debug(
                        "Query %r failed (attempt %d/%d): %s",
                        self._query_key,
                        attempt,
                        attempts,
                        e,
                    )
                    if self._retry_delay > 0:
                        time.sleep(self._retry_delay)
                continue

            self._fetched_at = fetched_at
            self._result = QueryResult(data=data)
            if not ran:
                logger.debug("Query cache hit for %r", self._query_key)
            elif self._on_success is not None:
                self._on_success(data)
            return self._result

        error = QueryError(str(last_exc), query_key=self._query_key)
        error.__cause__ = last_exc
        logger.error(
            "Query %r failed after %d attempt(s): %s",
            self._query_key,
            attempts,
            last_exc,
        )
        self._result = QueryResult(data=self._result.data, error=error)
        if self._on_error is not None:
            self._on_error(error)
        return self._result

    def __repr__(self) -> str:
        return (
            f"ApiQuery(query_key={self._query_key!r}, enabled={self.enabled}, "
            f"stale={self.is_stale})"
        )
