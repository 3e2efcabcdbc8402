"""Multi-column sort state with bounded depth and FIFO eviction."""

import dataclasses
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.config import DEFAULT_MAX_SORTS, DEFAULT_SORT, coerce_sort_entries
from ..core.types import SORT_DIRECTIONS, SortEntry, opposite_direction


def renumber(entries: Sequence[SortEntry]) -> Tuple[SortEntry, ...]:
    """Reassign priorities ``0..k-1`` in list order."""
    return tuple(
        dataclasses.replace(entry, priority=index) for index, entry in enumerate(entries)
    )


class MultiSortController:
    """
    Owns an ordered list of priority-tagged sort entries.

    Priorities are kept contiguous (0 = primary) after every mutation. The
    list never grows beyond ``max_depth``: adding a column to a full list
    evicts the oldest entry (priority 0).

    Toggle cycle per column: absent -> ``initial_direction`` -> opposite ->
    removed. Removing the last entry restores ``default_sorts``.
    """

    def __init__(
        self,
        sorts: Optional[Sequence[SortEntry]] = None,
        max_depth: int = DEFAULT_MAX_SORTS,
        default_sorts: Sequence[SortEntry] = DEFAULT_SORT,
        initial_direction: str = "desc",
        on_sort: Optional[Callable[[List[SortEntry]], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            sorts: Initial entries. Defaults to ``default_sorts``.
            max_depth: Maximum number of sort columns (default: 3)
            default_sorts: Entries restored when the list becomes empty
                (default: ``id`` descending)
            initial_direction: Direction for a newly added column
            on_sort: Called with the new entry list after every change
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {max_depth}")
        if initial_direction not in SORT_DIRECTIONS:
            raise ValueError(
                f"initial_direction must be one of {SORT_DIRECTIONS}, "
                f"got {initial_direction!r}"
            )
        self._max_depth = max_depth
        # Lowest-priority entries beyond max_depth are dropped
        self._default_sorts = coerce_sort_entries(default_sorts)[:max_depth]
        self._initial_direction = initial_direction
        self._on_sort = on_sort
        if sorts is None:
            self._sorts = self._default_sorts
        else:
            self._sorts = coerce_sort_entries(sorts)[:max_depth]

    @property
    def sorts(self) -> List[SortEntry]:
        """Current entries in priority order."""
        return list(self._sorts)

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def primary(self) -> Optional[SortEntry]:
        """The priority-0 entry, if any."""
        return self._sorts[0] if self._sorts else None

    def _find(self, column: str) -> int:
        for index, entry in enumerate(self._sorts):
            if entry.column == column:
                return index
        return -1

    def _commit(self, entries: Sequence[SortEntry]) -> List[SortEntry]:
        self._sorts = renumber(entries) if entries else self._default_sorts
        if self._on_sort is not None:
            self._on_sort(list(self._sorts))
        return list(self._sorts)

    def next_sorts(self, column: str) -> List[SortEntry]:
        """Compute the entries a toggle of ``column`` would produce."""
        entries = list(self._sorts)
        index = self._find(column)

        if index == -1:
            overflow = len(entries) + 1 - self._max_depth
            if overflow > 0:
                # Evict oldest (lowest priority number) first
                entries = entries[overflow:]
            entries.append(SortEntry(column, self._initial_direction, len(entries)))
            return list(renumber(entries))

        existing = entries[index]
        if existing.direction == self._initial_direction:
            entries[index] = dataclasses.replace(
                existing, direction=opposite_direction(self._initial_direction)
            )
            return entries

        del entries[index]
        if not entries:
            return list(self._default_sorts)
        return list(renumber(entries))

    def toggle(self, column: str) -> List[SortEntry]:
        """
        Advance the sort cycle for a column.

        Args:
            column: Column key whose header was clicked

        Returns:
            The new entries in priority order
        """
        return self._commit(self.next_sorts(column))

    def set_sort(self, column: str, direction: str) -> List[SortEntry]:
        """
        Set an explicit direction for a column.

        An absent column is appended; if the list is already full it replaces
        the last (lowest-priority) entry instead.
        """
        if direction not in SORT_DIRECTIONS:
            raise ValueError(f"direction must be one of {SORT_DIRECTIONS}")
        entries = list(self._sorts)
        index = self._find(column)
        if index >= 0:
            entries[index] = dataclasses.replace(entries[index], direction=direction)
        elif len(entries) >= self._max_depth:
            entries[-1] = SortEntry(column, direction, len(entries) - 1)
        else:
            entries.append(SortEntry(column, direction, len(entries)))
        return self._commit(entries)

    def remove_sort(self, column: str) -> List[SortEntry]:
        """Remove a column; falls back to the default sort when emptied."""
        return self._commit([e for e in self._sorts if e.column != column])

    def reset_to_default(self) -> List[SortEntry]:
        """Restore ``default_sorts``."""
        return self._commit(())

    clear = reset_to_default

    def get_sort_direction(self, column: str) -> Optional[str]:
        """Direction of a column, or None if it is not sorted."""
        index = self._find(column)
        return self._sorts[index].direction if index >= 0 else None

    def get_sort_index(self, column: str) -> int:
        """1-based position of a column for header badges, -1 if not sorted."""
        index = self._find(column)
        return index + 1 if index >= 0 else -1

    def __repr__(self) -> str:
        entries = ", ".join(f"{e.column} {e.direction}" for e in self._sorts)
        return f"MultiSortController([{entries}], max_depth={self._max_depth})"
