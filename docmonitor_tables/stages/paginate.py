"""Pagination stage strategies."""

from typing import Hashable, Sequence, Tuple, TypeVar

from ..core.base import BaseStage, PassThroughStage
from ..core.config import PaginationConfig
from ..core.registry import register_stage
from ..core.types import Column
from ..processing.pagination import slice_page

T = TypeVar("T")


@register_stage("paginate", "client")
class ClientPaginateStage(BaseStage[T]):
    """Slices the current page out of the filtered and sorted rows."""

    _config: PaginationConfig

    def apply(self, rows: Sequence[T], columns: Sequence[Column]) -> Sequence[T]:
        return slice_page(rows, self._config.current_page, self._config.page_size)

    def signature(self) -> Tuple[Hashable, ...]:
        return (self._config.current_page, self._config.page_size)


@register_stage("paginate", "server")
class ServerPaginateStage(PassThroughStage[T]):
    """Rows arrive as the current page already."""
