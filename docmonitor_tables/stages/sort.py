"""Sort stage strategies."""

from typing import Hashable, Sequence, Tuple, TypeVar

from ..core.base import BaseStage, PassThroughStage
from ..core.config import MultiSortConfig, SingleSortConfig
from ..core.registry import register_stage
from ..core.types import Column
from ..processing.sorting import sort_rows, sort_rows_multi

T = TypeVar("T")


@register_stage("sort", "client")
class ClientSortStage(BaseStage[T]):
    """Sorts rows locally according to a single or multi sort config."""

    def apply(self, rows: Sequence[T], columns: Sequence[Column]) -> Sequence[T]:
        config = self._config
        if isinstance(config, SingleSortConfig):
            return sort_rows(rows, config.column, config.direction)
        if isinstance(config, MultiSortConfig):
            return sort_rows_multi(rows, config.sorts)
        raise TypeError(f"Unsupported sort config type: {type(config).__name__}")

    def signature(self) -> Tuple[Hashable, ...]:
        config = self._config
        if isinstance(config, SingleSortConfig):
            return ("single", config.column or "", config.direction)
        return (
            "multi",
            tuple((e.column, e.direction, e.priority) for e in config.sorts),
        )


@register_stage("sort", "server")
class ServerSortStage(PassThroughStage[T]):
    """Rows arrive already sorted by the caller."""
