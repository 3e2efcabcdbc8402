"""Row selection with a page-scoped tri-state indicator."""

from typing import Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

K = TypeVar("K", bound=Hashable)


class SelectionController(Generic[K]):
    """
    Set-based row selection.

    Selected keys keep their insertion order. The "all selected" and
    "partially selected" indicators are computed against the id list most
    recently passed to ``select_all``, ``toggle_select_all`` or
    ``set_visible_ids`` (normally the visible page), not the whole dataset.

    Filtering, sorting and paging never clear the selection; only
    ``deselect_all`` and explicit toggles remove keys.
    """

    def __init__(
        self,
        initial_selected: Iterable[K] = (),
        on_change: Optional[Callable[[List[K]], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            initial_selected: Keys selected at construction
            on_change: Called with the selected keys after every mutation
        """
        self._selected: Dict[K, None] = dict.fromkeys(initial_selected)
        self._visible_ids: List[K] = []
        self._on_change = on_change

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.selected_ids)

    @property
    def selected_ids(self) -> List[K]:
        return list(self._selected)

    @property
    def selected_count(self) -> int:
        return len(self._selected)

    @property
    def visible_ids(self) -> List[K]:
        return list(self._visible_ids)

    def is_selected(self, key: K) -> bool:
        return key in self._selected

    @property
    def is_all_selected(self) -> bool:
        """True when every visible id is selected (False if none are visible)."""
        if not self._visible_ids:
            return False
        return all(key in self._selected for key in self._visible_ids)

    @property
    def is_partially_selected(self) -> bool:
        """True when some, but not all, visible ids are selected."""
        if not self._visible_ids:
            return False
        count = sum(1 for key in self._visible_ids if key in self._selected)
        return 0 < count < len(self._visible_ids)

    def set_visible_ids(self, ids: Iterable[K]) -> None:
        """Record the currently visible ids without changing the selection."""
        self._visible_ids = list(ids)

    def toggle(self, key: K) -> List[K]:
        """Flip membership of one key."""
        if key in self._selected:
            del self._selected[key]
        else:
            self._selected[key] = None
        self._notify()
        return self.selected_ids

    def select_all(self, ids: Iterable[K]) -> List[K]:
        """Add all ``ids`` and record them as the visible page."""
        self._visible_ids = list(ids)
        for key in self._visible_ids:
            self._selected[key] = None
        self._notify()
        return self.selected_ids

    def toggle_select_all(self, ids: Iterable[K]) -> List[K]:
        """
        Deselect ``ids`` if all of them are selected, otherwise select them all.

        ``ids`` is recorded as the visible page. Applying the call twice with
        the same ids restores a selection that held none or all of them.
        """
        self._visible_ids = list(ids)
        if all(key in self._selected for key in self._visible_ids):
            for key in self._visible_ids:
                self._selected.pop(key, None)
        else:
            for key in self._visible_ids:
                self._selected[key] = None
        self._notify()
        return self.selected_ids

    def deselect_all(self) -> List[K]:
        """Clear the selection."""
        self._selected.clear()
        self._notify()
        return []

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, key: object) -> bool:
        return key in self._selected

    def __repr__(self) -> str:
        return (
            f"SelectionController(selected={self.selected_ids}, "
            f"visible={self._visible_ids})"
        )
