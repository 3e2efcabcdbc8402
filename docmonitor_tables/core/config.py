"""Feature configuration objects and lenient coercion.

Every feature of the table is opt-in: passing ``None`` disables it. Configs can
be given as the dataclasses below or as plain dicts with the same keys. The
``coerce_*`` helpers normalise either form; anything malformed is reported and
turned into ``None`` so the feature falls back to pass-through.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    List,
    Literal,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .errors import TableConfigError
from .types import CLIENT, OPERATING_MODES, SORT_DIRECTIONS, Column, SortEntry

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 20, 50, 100)
DEFAULT_MAX_PAGE_BUTTONS = 7
MIN_PAGE_BUTTONS = 5  # first, ellipsis, current, ellipsis, last
DEFAULT_MAX_SORTS = 3
DEFAULT_SORT: Tuple[SortEntry, ...] = (SortEntry("id", "desc", 0),)
DEFAULT_ACTIONS_HEADER = "Actions"
DEFAULT_ACTIONS_WIDTH = "120px"
ACTIONS_COLUMN_KEY = "__actions"


@dataclass
class FilterConfig:
    """Free-text search across all declared columns."""

    value: str = ""
    on_change: Optional[Callable[[str], None]] = None
    mode: str = CLIENT
    placeholder: str = "Search..."
    on_search: Optional[Callable[[], None]] = None
    disabled: bool = False


@dataclass
class SingleSortConfig:
    """Sort by one column; header clicks cycle initial -> opposite -> unsorted."""

    column: Optional[str] = None
    direction: Optional[str] = None
    on_sort: Optional[Callable[[str, Optional[str]], None]] = None
    mode: str = CLIENT
    initial_direction: str = "asc"
    type: Literal["single"] = "single"


@dataclass
class MultiSortConfig:
    """Sort by up to ``max_sorts`` priority-ordered columns."""

    sorts: Sequence[SortEntry] = ()
    on_sort: Optional[Callable[[List[SortEntry]], None]] = None
    mode: str = CLIENT
    max_sorts: int = DEFAULT_MAX_SORTS
    initial_direction: str = "desc"
    default_sorts: Sequence[SortEntry] = DEFAULT_SORT
    type: Literal["multi"] = "multi"


SortConfig = Union[SingleSortConfig, MultiSortConfig]


@dataclass
class PaginationConfig:
    """Page position and page-size choices."""

    current_page: int = 1
    total_items: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    on_page_change: Optional[Callable[[int], None]] = None
    on_page_size_change: Optional[Callable[[int], None]] = None
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS
    max_page_buttons: int = DEFAULT_MAX_PAGE_BUTTONS
    show_info: bool = True
    show_page_size_selector: bool = True
    mode: str = CLIENT


@dataclass
class SelectionConfig:
    """Checkbox selection; always driven by the caller."""

    selected_ids: Sequence[Any] = ()
    on_selection_change: Optional[Callable[[List[Any]], None]] = None
    get_row_id: Optional[Callable[[Any], Any]] = None
    render_bulk_actions: Optional[Callable[[List[Any]], Any]] = None


@dataclass
class RowActionsConfig:
    """Extra presentation-only column rendering per-row actions."""

    render: Callable[[Any], Any]
    width: str = DEFAULT_ACTIONS_WIDTH
    header: str = DEFAULT_ACTIONS_HEADER


@dataclass
class EmptyStateAction:
    """Button offered in the empty state, e.g. "Create request"."""

    label: str
    on_click: Callable[[], None]


@dataclass
class EmptyStateConfig:
    message: str = "No data found"
    description: Optional[str] = None
    action: Optional[EmptyStateAction] = None


@dataclass
class ErrorState:
    message: str
    on_retry: Optional[Callable[[], None]] = None
    error: bool = True


def _reject(feature: str, message: str, strict: bool) -> None:
    if strict:
        raise TableConfigError(feature, message)
    logger.warning(
        "Ignoring %s configuration (%s); feature falls back to pass-through",
        feature,
        message,
    )
    return None


def _from_mapping(cls, value: Any, feature: str, strict: bool):
    """Build a config dataclass from a dict, ignoring unknown keys."""
    if isinstance(value, cls):
        return value
    if not isinstance(value, dict):
        return _reject(feature, f"expected {cls.__name__} or dict", strict)

    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(value) - names)
    if unknown:
        logger.debug("Unknown %s config keys ignored: %s", feature, unknown)
    try:
        return cls(**{k: v for k, v in value.items() if k in names})
    except TypeError as e:
        return _reject(feature, str(e), strict)


def _check_mode(config: Any, feature: str, strict: bool) -> bool:
    if config.mode not in OPERATING_MODES:
        _reject(feature, f"unknown mode {config.mode!r}", strict)
        return False
    return True


def _check_callable(value: Any, name: str, feature: str, strict: bool) -> bool:
    if value is not None and not callable(value):
        _reject(feature, f"{name} must be callable", strict)
        return False
    return True


def coerce_sort_entries(entries: Any) -> Tuple[SortEntry, ...]:
    """
    Normalise sort entries and renumber priorities to ``0..k-1``.

    Accepts SortEntry objects, dicts with ``column``/``direction`` (``dir`` is
    accepted as an alias) and optional ``priority``, or ``(column, direction)``
    pairs. Entries are ordered by their given priority (stable), entries with
    an unknown direction or no column are dropped.

    Args:
        entries: Iterable of sort entry-like values

    Returns:
        Tuple of SortEntry with contiguous priorities
    """
    if not entries:
        return ()

    parsed: List[SortEntry] = []
    for position, entry in enumerate(entries):
        if isinstance(entry, SortEntry):
            parsed.append(entry)
            continue
        if isinstance(entry, dict):
            column = entry.get("column")
            direction = entry.get("direction", entry.get("dir"))
            priority = entry.get("priority", position)
        elif isinstance(entry, (tuple, list)) and len(entry) == 2:
            column, direction = entry
            priority = position
        else:
            logger.debug("Dropping unrecognised sort entry %r", entry)
            continue
        if isinstance(direction, str):
            direction = direction.lower()
        if not column or direction not in SORT_DIRECTIONS:
            logger.debug("Dropping invalid sort entry %r", entry)
            continue
        if not isinstance(priority, int):
            priority = position
        parsed.append(SortEntry(str(column), direction, priority))

    ordered = sorted(parsed, key=lambda e: e.priority)
    return tuple(
        dataclasses.replace(entry, priority=index)
        for index, entry in enumerate(ordered)
    )


def coerce_columns(columns: Any) -> List[Column]:
    """
    Normalise column descriptors.

    Dicts may use ``key``/``header`` or the Tabulator-style ``field``/``title``.
    Entries without a key are skipped.
    """
    result: List[Column] = []
    for col in columns or ():
        if isinstance(col, Column):
            result.append(col)
            continue
        if isinstance(col, str):
            result.append(Column(key=col))
            continue
        if isinstance(col, dict):
            key = col.get("key", col.get("field"))
            if not key:
                logger.warning("Skipping column definition without key: %r", col)
                continue
            result.append(
                Column(
                    key=str(key),
                    header=col.get("header", col.get("title")),
                    sortable=bool(col.get("sortable", False)),
                    width=col.get("width"),
                    render=col.get("render"),
                    align=col.get("align", col.get("hozAlign")),
                )
            )
            continue
        logger.warning("Skipping unrecognised column definition: %r", col)
    return result


def coerce_filter_config(value: Any, strict: bool = False) -> Optional[FilterConfig]:
    """Normalise a filter config; returns None when disabled or malformed."""
    if value is None:
        return None
    config = _from_mapping(FilterConfig, value, "filter", strict)
    if config is None or not _check_mode(config, "filter", strict):
        return None
    for name in ("on_change", "on_search"):
        if not _check_callable(getattr(config, name), name, "filter", strict):
            return None
    if config.value is None:
        config = dataclasses.replace(config, value="")
    elif not isinstance(config.value, str):
        config = dataclasses.replace(config, value=str(config.value))
    return config


def coerce_sort_config(value: Any, strict: bool = False) -> Optional[SortConfig]:
    """
    Normalise a sort config, dispatching on the ``type`` discriminator.

    Args:
        value: SingleSortConfig, MultiSortConfig, or dict with ``type`` of
            'single' or 'multi'
        strict: Raise TableConfigError instead of logging and returning None

    Returns:
        The normalised config, or None if disabled or malformed
    """
    if value is None:
        return None

    if isinstance(value, dict):
        sort_type = value.get("type")
        if sort_type == "single":
            config = _from_mapping(SingleSortConfig, value, "sort", strict)
        elif sort_type == "multi":
            config = _from_mapping(MultiSortConfig, value, "sort", strict)
        else:
            return _reject("sort", f"unknown sort type {sort_type!r}", strict)
    elif isinstance(value, (SingleSortConfig, MultiSortConfig)):
        config = value
    else:
        return _reject("sort", "expected SingleSortConfig or MultiSortConfig", strict)

    if config is None or not _check_mode(config, "sort", strict):
        return None
    if not _check_callable(config.on_sort, "on_sort", "sort", strict):
        return None
    if config.initial_direction not in SORT_DIRECTIONS:
        return _reject(
            "sort", f"unknown initial direction {config.initial_direction!r}", strict
        )

    if isinstance(config, SingleSortConfig):
        if config.direction is not None and config.direction not in SORT_DIRECTIONS:
            return _reject("sort", f"unknown direction {config.direction!r}", strict)
        return config

    if not isinstance(config.max_sorts, int) or config.max_sorts < 1:
        return _reject("sort", f"max_sorts must be >= 1, got {config.max_sorts!r}", strict)

    sorts = coerce_sort_entries(config.sorts)
    if len(sorts) > config.max_sorts:
        if strict:
            raise TableConfigError(
                "sort", f"{len(sorts)} sorts exceed max_sorts={config.max_sorts}"
            )
        logger.warning(
            "Keeping the first %d of %d sort entries (max_sorts)",
            config.max_sorts,
            len(sorts),
        )
        sorts = sorts[: config.max_sorts]
    return dataclasses.replace(
        config,
        sorts=sorts,
        default_sorts=coerce_sort_entries(config.default_sorts)[: config.max_sorts],
    )


def coerce_pagination_config(
    value: Any, strict: bool = False
) -> Optional[PaginationConfig]:
    """Normalise a pagination config; returns None when disabled or malformed."""
    if value is None:
        return None
    config = _from_mapping(PaginationConfig, value, "pagination", strict)
    if config is None or not _check_mode(config, "pagination", strict):
        return None
    for name in ("on_page_change", "on_page_size_change"):
        if not _check_callable(getattr(config, name), name, "pagination", strict):
            return None
    for name in ("current_page", "total_items", "page_size", "max_page_buttons"):
        if not isinstance(getattr(config, name), int) or isinstance(
            getattr(config, name), bool
        ):
            return _reject("pagination", f"{name} must be an integer", strict)
    if config.page_size < 1:
        return _reject(
            "pagination", f"page_size must be >= 1, got {config.page_size}", strict
        )
    if config.max_page_buttons < MIN_PAGE_BUTTONS:
        return _reject(
            "pagination",
            f"max_page_buttons must be >= {MIN_PAGE_BUTTONS}, "
            f"got {config.max_page_buttons}",
            strict,
        )
    return config


def coerce_selection_config(
    value: Any, strict: bool = False
) -> Optional[SelectionConfig]:
    """Normalise a selection config; returns None when disabled or malformed."""
    if value is None:
        return None
    config = _from_mapping(SelectionConfig, value, "selection", strict)
    if config is None:
        return None
    for name in ("on_selection_change", "get_row_id", "render_bulk_actions"):
        if not _check_callable(getattr(config, name), name, "selection", strict):
            return None
    return config


def coerce_row_actions_config(
    value: Any, strict: bool = False
) -> Optional[RowActionsConfig]:
    """Normalise a row actions config; returns None when disabled or malformed."""
    if value is None:
        return None
    if isinstance(value, dict) and "render" not in value:
        return _reject("row_actions", "render is required", strict)
    config = _from_mapping(RowActionsConfig, value, "row_actions", strict)
    if config is None:
        return None
    if not callable(config.render):
        return _reject("row_actions", "render must be callable", strict)
    return config
