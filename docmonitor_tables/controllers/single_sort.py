"""Single-column sort state with click cycling."""

from typing import Callable, Optional

from ..core.types import SORT_DIRECTIONS, UNSORTED, SingleSortState, opposite_direction


class SingleSortController:
    """
    Owns one ``(column, direction)`` pair.

    Repeated toggles of the same column cycle
    ``initial_direction -> opposite -> unsorted``. Toggling a different column
    starts over at ``initial_direction``.

    Example:
        controller = SingleSortController(on_sort=print)
        controller.toggle("name")   # ('name', 'asc')
        controller.toggle("name")   # ('name', 'desc')
        controller.toggle("name")   # ('', None)
    """

    def __init__(
        self,
        column: Optional[str] = None,
        direction: Optional[str] = None,
        initial_direction: str = "asc",
        on_sort: Optional[Callable[[str, Optional[str]], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            column: Currently sorted column, if any
            direction: Current direction ('asc', 'desc' or None)
            initial_direction: Direction applied on the first click of a column
            on_sort: Called with ``(column, direction)`` after every toggle
        """
        if initial_direction not in SORT_DIRECTIONS:
            raise ValueError(
                f"initial_direction must be one of {SORT_DIRECTIONS}, "
                f"got {initial_direction!r}"
            )
        self._initial_direction = initial_direction
        self._on_sort = on_sort
        self._state = SingleSortState(column=column, direction=direction)

    @property
    def state(self) -> SingleSortState:
        return self._state

    @property
    def column(self) -> Optional[str]:
        return self._state.column

    @property
    def direction(self) -> Optional[str]:
        return self._state.direction

    def next_state(self, column: str) -> SingleSortState:
        """Compute the state a toggle of ``column`` would produce."""
        current = self._state
        if current.column != column or current.direction not in SORT_DIRECTIONS:
            return SingleSortState(column=column, direction=self._initial_direction)
        if current.direction == self._initial_direction:
            return SingleSortState(
                column=column, direction=opposite_direction(self._initial_direction)
            )
        return UNSORTED

    def toggle(self, column: str) -> SingleSortState:
        """
        Advance the sort cycle for a column and notify ``on_sort``.

        Args:
            column: Column key whose header was clicked

        Returns:
            The new sort state
        """
        self._state = self.next_state(column)
        if self._on_sort is not None:
            self._on_sort(self._state.column, self._state.direction)
        return self._state

    def clear(self) -> None:
        """Reset to unsorted without notifying."""
        self._state = UNSORTED

    def __repr__(self) -> str:
        return (
            f"SingleSortController(column={self._state.column!r}, "
            f"direction={self._state.direction!r})"
        )
