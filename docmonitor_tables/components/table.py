"""Paginated table orchestrator."""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Generic,
    Hashable,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from ..controllers.multi_sort import MultiSortController
from ..controllers.selection import SelectionController
from ..controllers.single_sort import SingleSortController
from ..core.base import BaseStage
from ..core.cache import StageCache
from ..core.config import (
    ACTIONS_COLUMN_KEY,
    EmptyStateAction,
    EmptyStateConfig,
    ErrorState,
    FilterConfig,
    MultiSortConfig,
    PaginationConfig,
    RowActionsConfig,
    SelectionConfig,
    SingleSortConfig,
    SortConfig,
    coerce_columns,
    coerce_filter_config,
    coerce_pagination_config,
    coerce_row_actions_config,
    coerce_selection_config,
    coerce_sort_config,
)
from ..core.registry import get_stage_class
from ..core.types import (
    CLIENT,
    SERVER,
    Column,
    PageItem,
    RowKeyExtractor,
    SingleSortState,
    SortEntry,
)
from ..processing.compare import get_nested_value
from ..processing.pagination import (
    clamp_page,
    get_item_range,
    get_page_numbers,
    get_total_pages,
)
from ..stages import PIPELINE_ORDER

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UPDATABLE_INPUTS = (
    "data",
    "columns",
    "row_key",
    "filter",
    "sort",
    "pagination",
    "selection",
    "row_actions",
    "loading",
    "error",
    "empty_state",
)


@dataclass
class TableView(Generic[T]):
    """
    Everything a renderer needs to draw one table state.

    ``rows`` are the raw rows of the current page; renderers format cells with
    each column's ``render`` or ``format_value``.
    """

    rows: List[T]
    row_keys: List[Any]
    columns: List[Column]
    sort: Optional[SingleSortState] = None
    sort_directions: Dict[str, Optional[str]] = field(default_factory=dict)
    sort_indexes: Dict[str, int] = field(default_factory=dict)
    filter_value: str = ""
    current_page: int = 1
    page_size: int = 0
    total_items: int = 0
    total_pages: int = 1
    page_numbers: List[PageItem] = field(default_factory=list)
    item_range: Tuple[int, int] = (0, 0)
    selected_ids: List[Any] = field(default_factory=list)
    all_selected: bool = False
    partially_selected: bool = False
    loading: bool = False
    error: Optional[ErrorState] = None
    empty_state: EmptyStateConfig = field(default_factory=EmptyStateConfig)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to show and no loading or error state."""
        return not self.rows and not self.loading and self.error is None

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages


def _coerce_error(error: Any) -> Optional[ErrorState]:
    if error is None or error is False:
        return None
    if isinstance(error, ErrorState):
        return error
    if isinstance(error, dict):
        return ErrorState(
            message=str(error.get("message", "")),
            on_retry=error.get("on_retry"),
        )
    return ErrorState(message=str(error))


def _coerce_empty_action(value: Any) -> Optional[EmptyStateAction]:
    if value is None or isinstance(value, EmptyStateAction):
        return value
    if isinstance(value, dict):
        label, on_click = value.get("label"), value.get("on_click")
        if label and callable(on_click):
            return EmptyStateAction(label=str(label), on_click=on_click)
    logger.warning("Ignoring empty state action %r (needs label and on_click)", value)
    return None


def _coerce_empty_state(value: Any) -> EmptyStateConfig:
    if value is None:
        return EmptyStateConfig()
    if isinstance(value, EmptyStateConfig):
        return dataclasses.replace(value, action=_coerce_empty_action(value.action))
    if isinstance(value, str):
        return EmptyStateConfig(message=value)
    if isinstance(value, dict):
        return EmptyStateConfig(
            message=value.get("message", EmptyStateConfig.message),
            description=value.get("description"),
            action=_coerce_empty_action(value.get("action")),
        )
    logger.warning("Ignoring unrecognised empty state %r", value)
    return EmptyStateConfig()


class PaginatedTable(Generic[T]):
    """
    Generic data table engine running filter -> sort -> paginate.

    Each feature is opt-in and runs in 'client' mode (computed here on the full
    row list) or 'server' mode (the caller already applied it and this engine
    only emits callbacks). Results of each stage are memoized, so repeated
    ``view()`` calls with unchanged inputs do no work.

    Malformed feature configs never raise: the feature is logged and dropped.

    Example:
        table = PaginatedTable(
            rows,
            columns=[Column("id", sortable=True), Column("status.name")],
            filter=FilterConfig(value="pending"),
            sort=MultiSortConfig(sorts=[SortEntry("id", "desc", 0)]),
            pagination=PaginationConfig(page_size=20),
        )
        view = table.view()
        table.click_header("status.name")
    """

    def __init__(
        self,
        data: Sequence[T],
        columns: Sequence[Union[Column, Dict[str, Any], str]],
        row_key: RowKeyExtractor = "id",
        filter: Optional[Union[FilterConfig, Dict[str, Any]]] = None,
        sort: Optional[Union[SortConfig, Dict[str, Any]]] = None,
        pagination: Optional[Union[PaginationConfig, Dict[str, Any]]] = None,
        selection: Optional[Union[SelectionConfig, Dict[str, Any]]] = None,
        row_actions: Optional[Union[RowActionsConfig, Dict[str, Any]]] = None,
        loading: bool = False,
        error: Any = None,
        empty_state: Any = None,
    ):
        """
        Initialize the table.

        Args:
            data: Rows to display. In client mode the full dataset, in server
                mode the page the caller fetched.
            columns: Column descriptors (Column, dict or key string)
            row_key: Column key or callable returning a row's identity
            filter: Search box configuration, None to disable
            sort: SingleSortConfig or MultiSortConfig, None to disable
            pagination: Pagination configuration, None to show all rows
            selection: Checkbox selection configuration, None to disable
            row_actions: Per-row actions column, None to disable
            loading: Show a loading state
            error: Error message, ErrorState or exception to show
            empty_state: Message shown when there are no rows
        """
        self._cache = StageCache()
        self._revision = 0
        self._data: Sequence[T] = ()
        self._columns: List[Column] = []
        self._row_key: RowKeyExtractor = "id"
        self._filter: Optional[FilterConfig] = None
        self._sort: Optional[SortConfig] = None
        self._pagination: Optional[PaginationConfig] = None
        self._selection: Optional[SelectionConfig] = None
        self._row_actions: Optional[RowActionsConfig] = None
        self._selection_controller: Optional[SelectionController] = None
        self._sort_controller: Optional[
            Union[SingleSortController, MultiSortController]
        ] = None
        self.loading = False
        self.error: Optional[ErrorState] = None
        self.empty_state = EmptyStateConfig()

        self.update(
            data=data,
            columns=columns,
            row_key=row_key,
            filter=filter,
            sort=sort,
            pagination=pagination,
            selection=selection,
            row_actions=row_actions,
            loading=loading,
            error=error,
            empty_state=empty_state,
        )

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def update(self, **inputs: Any) -> None:
        """
        Replace controlled inputs.

        Accepts any constructor argument. Memoized results depending on a
        replaced input are dropped.

        Raises:
            TypeError: For unknown input names
        """
        unknown = sorted(set(inputs) - set(_UPDATABLE_INPUTS))
        if unknown:
            raise TypeError(f"Unknown table inputs: {unknown}")

        if "data" in inputs:
            data = inputs["data"]
            self._data = data if data is not None else ()
            self._revision += 1
        if "columns" in inputs:
            self._columns = coerce_columns(inputs["columns"])
        if "row_key" in inputs:
            row_key = inputs["row_key"]
            if not (callable(row_key) or (isinstance(row_key, str) and row_key)):
                logger.warning("Invalid row_key %r; using 'id'", row_key)
                row_key = "id"
            self._row_key = row_key
        if "filter" in inputs:
            self._filter = self._check_handler(
                coerce_filter_config(inputs["filter"]), "filter", "on_change"
            )
        if "sort" in inputs:
            self._sort = self._check_handler(
                coerce_sort_config(inputs["sort"]), "sort", "on_sort"
            )
            self._sort_controller = self._build_sort_controller()
        if "pagination" in inputs:
            self._pagination = self._check_handler(
                coerce_pagination_config(inputs["pagination"]),
                "pagination",
                "on_page_change",
            )
        if "selection" in inputs:
            self._selection = coerce_selection_config(inputs["selection"])
            self._selection_controller = self._build_selection_controller()
        if "row_actions" in inputs:
            self._row_actions = coerce_row_actions_config(inputs["row_actions"])
        if "loading" in inputs:
            self.loading = bool(inputs["loading"])
        if "error" in inputs:
            self.error = _coerce_error(inputs["error"])
        if "empty_state" in inputs:
            self.empty_state = _coerce_empty_state(inputs["empty_state"])

        if set(inputs) & {"data", "columns", "filter", "sort", "pagination"}:
            self._cache.invalidate()

    @staticmethod
    def _check_handler(config: Any, feature: str, handler: str) -> Any:
        """Drop a server-mode feature that has no way to reach the caller."""
        if config is None or config.mode != SERVER:
            return config
        if getattr(config, handler) is None:
            logger.warning(
                "Ignoring %s configuration (server mode requires %s); "
                "feature falls back to pass-through",
                feature,
                handler,
            )
            return None
        return config

    def _build_sort_controller(
        self,
    ) -> Optional[Union[SingleSortController, MultiSortController]]:
        config = self._sort
        if isinstance(config, SingleSortConfig):
            return SingleSortController(
                column=config.column,
                direction=config.direction,
                initial_direction=config.initial_direction,
                on_sort=config.on_sort,
            )
        if isinstance(config, MultiSortConfig):
            return MultiSortController(
                sorts=config.sorts,
                max_depth=config.max_sorts,
                default_sorts=config.default_sorts,
                initial_direction=config.initial_direction,
                on_sort=config.on_sort,
            )
        return None

    def _build_selection_controller(self) -> Optional[SelectionController]:
        config = self._selection
        if config is None:
            return None
        return SelectionController(
            initial_selected=config.selected_ids or (),
            on_change=config.on_selection_change,
        )

    @property
    def data(self) -> Sequence[T]:
        return self._data

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    @property
    def filter_config(self) -> Optional[FilterConfig]:
        return self._filter

    @property
    def sort_config(self) -> Optional[SortConfig]:
        return self._sort

    @property
    def pagination_config(self) -> Optional[PaginationConfig]:
        return self._pagination

    @property
    def selection_config(self) -> Optional[SelectionConfig]:
        return self._selection

    @property
    def row_actions_config(self) -> Optional[RowActionsConfig]:
        return self._row_actions

    @property
    def cache(self) -> StageCache:
        return self._cache

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def get_row_key(self, row: T) -> Any:
        """Identity of a row, used for selection."""
        if self._selection is not None and self._selection.get_row_id is not None:
            return self._selection.get_row_id(row)
        if callable(self._row_key):
            return self._row_key(row)
        return get_nested_value(row, self._row_key)

    def _stage_config(self, stage: str) -> Any:
        if stage == "filter":
            return self._filter
        if stage == "sort":
            return self._sort
        return self._pagination

    def _build_stage(self, stage: str) -> Optional[BaseStage[T]]:
        config = self._stage_config(stage)
        if config is None:
            return None
        cls = get_stage_class(stage, config.mode)
        logger.debug("Using %s for %s stage", cls.__name__, stage)
        return cls(config)

    def _run_pipeline(self) -> Tuple[Sequence[T], Sequence[T]]:
        """
        Run every enabled stage, reusing memoized results.

        Returns:
            Tuple of (rows before pagination, rows of the current page)
        """
        rows: Sequence[T] = self._data
        key: Tuple[Hashable, ...] = (self._revision, tuple(self._columns))
        before_paging: Sequence[T] = rows

        for stage_name in PIPELINE_ORDER:
            if stage_name == "paginate":
                before_paging = rows
            stage = self._build_stage(stage_name)
            if stage is None:
                continue
            key = key + ((stage_name, stage.mode) + stage.signature(),)
            cached = self._cache.get(stage_name, key)
            if cached is not None:
                rows = cached
                continue
            rows = stage.apply(rows, self._columns)
            self._cache.set(stage_name, key, rows)

        return before_paging, rows

    def _total_items(self, before_paging: Sequence[T]) -> int:
        config = self._pagination
        if config is None:
            return len(before_paging)
        if config.mode == CLIENT:
            return len(before_paging)
        return max(0, config.total_items)

    def _current_sort(self) -> Optional[SingleSortState]:
        controller = self._sort_controller
        if isinstance(controller, SingleSortController):
            return controller.state if controller.state.is_active else None
        if isinstance(controller, MultiSortController) and controller.primary:
            primary = controller.primary
            return SingleSortState(column=primary.column, direction=primary.direction)
        return None

    def _display_columns(self) -> List[Column]:
        columns = list(self._columns)
        if self._row_actions is not None:
            actions = self._row_actions
            columns.append(
                Column(
                    key=ACTIONS_COLUMN_KEY,
                    header=actions.header,
                    width=actions.width,
                    render=lambda value, row: actions.render(row),
                )
            )
        return columns

    def view(self) -> TableView[T]:
        """
        Compute the current display state.

        Returns:
            TableView for the renderer
        """
        before_paging, page_rows = self._run_pipeline()
        rows = list(page_rows)
        total_items = self._total_items(before_paging)

        sort_directions: Dict[str, Optional[str]] = {}
        sort_indexes: Dict[str, int] = {}
        controller = self._sort_controller
        for column in self._columns:
            if not column.sortable:
                continue
            if isinstance(controller, MultiSortController):
                sort_directions[column.key] = controller.get_sort_direction(column.key)
                sort_indexes[column.key] = controller.get_sort_index(column.key)
            elif isinstance(controller, SingleSortController):
                active = controller.state.is_active and controller.column == column.key
                sort_directions[column.key] = controller.direction if active else None
                sort_indexes[column.key] = 1 if active else -1

        pagination = self._pagination
        if pagination is not None:
            page_size = pagination.page_size
            total_pages = get_total_pages(total_items, page_size)
            current_page = clamp_page(pagination.current_page, total_pages)
            page_numbers = get_page_numbers(
                current_page, total_pages, pagination.max_page_buttons
            )
            item_range = get_item_range(current_page, page_size, total_items)
        else:
            page_size = len(rows)
            total_pages = 1
            current_page = 1
            page_numbers = [1]
            item_range = (1, total_items) if total_items else (0, 0)

        row_keys = [self.get_row_key(row) for row in rows]
        selected_ids: List[Any] = []
        all_selected = partially_selected = False
        selection = self._selection_controller
        if selection is not None:
            selection.set_visible_ids(row_keys)
            selected_ids = selection.selected_ids
            all_selected = selection.is_all_selected
            partially_selected = selection.is_partially_selected

        return TableView(
            rows=rows,
            row_keys=row_keys,
            columns=self._display_columns(),
            sort=self._current_sort(),
            sort_directions=sort_directions,
            sort_indexes=sort_indexes,
            filter_value=self._filter.value if self._filter is not None else "",
            current_page=current_page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            page_numbers=page_numbers,
            item_range=item_range,
            selected_ids=selected_ids,
            all_selected=all_selected,
            partially_selected=partially_selected,
            loading=self.loading,
            error=self.error,
            empty_state=self.empty_state,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def click_header(
        self, column: str
    ) -> Optional[Union[SingleSortState, List[SortEntry]]]:
        """
        Advance the sort cycle of a column.

        ``on_sort`` is called in both modes; rows are re-sorted locally only in
        client mode.

        Returns:
            The new sort state, or None if sorting is disabled or the column
            is not sortable
        """
        controller = self._sort_controller
        if controller is None:
            return None
        if not any(c.key == column and c.sortable for c in self._columns):
            logger.debug("Ignoring header click on non-sortable column %r", column)
            return None

        if isinstance(controller, SingleSortController):
            state = controller.toggle(column)
            self._sort = dataclasses.replace(
                self._sort, column=state.column, direction=state.direction
            )
            result: Union[SingleSortState, List[SortEntry]] = state
        else:
            sorts = controller.toggle(column)
            self._sort = dataclasses.replace(self._sort, sorts=tuple(sorts))
            result = sorts

        self._cache.invalidate("sort")
        self._cache.invalidate("paginate")
        return result

    def change_filter(self, value: str) -> None:
        """Set the search text and notify ``on_change``."""
        config = self._filter
        if config is None or config.disabled:
            return
        value = "" if value is None else str(value)
        if value == config.value:
            return
        self._filter = dataclasses.replace(config, value=value)
        if config.on_change is not None:
            config.on_change(value)
        self._cache.invalidate()

    def _total_pages(self) -> int:
        config = self._pagination
        if config is None:
            return 1
        before_paging, _ = self._run_pipeline()
        return get_total_pages(self._total_items(before_paging), config.page_size)

    def change_page(self, page: int) -> Optional[int]:
        """
        Move to a page.

        The page is clamped into the valid range; nothing happens when it
        equals the current page.

        Returns:
            The new page, or None if nothing changed
        """
        config = self._pagination
        if config is None:
            return None
        total_pages = self._total_pages()
        page = clamp_page(page, total_pages)
        if page == clamp_page(config.current_page, total_pages):
            return None
        self._pagination = dataclasses.replace(config, current_page=page)
        if config.on_page_change is not None:
            config.on_page_change(page)
        self._cache.invalidate("paginate")
        return page

    def change_page_size(self, size: int) -> None:
        """Change the page size, then go back to page 1."""
        config = self._pagination
        if config is None:
            return
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            logger.warning("Ignoring invalid page size %r", size)
            return
        self._pagination = dataclasses.replace(config, page_size=size, current_page=1)
        if config.on_page_size_change is not None:
            config.on_page_size_change(size)
        if config.on_page_change is not None:
            config.on_page_change(1)
        self._cache.invalidate("paginate")

    def toggle_row(self, key: Any) -> Optional[List[Any]]:
        """Flip selection of one row key."""
        if self._selection_controller is None:
            return None
        return self._selection_controller.toggle(key)

    def toggle_select_all(self) -> Optional[List[Any]]:
        """Select or deselect every row of the current display page."""
        if self._selection_controller is None:
            return None
        _, page_rows = self._run_pipeline()
        ids = [self.get_row_key(row) for row in page_rows]
        return self._selection_controller.toggle_select_all(ids)

    def deselect_all(self) -> Optional[List[Any]]:
        if self._selection_controller is None:
            return None
        return self._selection_controller.deselect_all()

    def retry(self) -> None:
        """Invoke the error state's retry handler, if any."""
        if self.error is not None and self.error.on_retry is not None:
            self.error.on_retry()

    def __repr__(self) -> str:
        enabled = [
            name
            for name, config in (
                ("filter", self._filter),
                ("sort", self._sort),
                ("pagination", self._pagination),
                ("selection", self._selection),
                ("row_actions", self._row_actions),
            )
            if config is not None
        ]
        return (
            f"PaginatedTable(rows={len(self._data)}, "
            f"columns={[c.key for c in self._columns]}, features={enabled})"
        )
