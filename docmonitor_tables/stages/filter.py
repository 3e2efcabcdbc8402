"""Filter stage strategies."""

from typing import Hashable, Sequence, Tuple, TypeVar

from ..core.base import BaseStage, PassThroughStage
from ..core.config import FilterConfig
from ..core.registry import register_stage
from ..core.types import Column
from ..processing.filtering import filter_rows

T = TypeVar("T")


@register_stage("filter", "client")
class ClientFilterStage(BaseStage[T]):
    """Case-insensitive substring search over all declared columns."""

    _config: FilterConfig

    def apply(self, rows: Sequence[T], columns: Sequence[Column]) -> Sequence[T]:
        return filter_rows(rows, self._config.value, columns)

    def signature(self) -> Tuple[Hashable, ...]:
        value = self._config.value
        # Blank queries all behave the same
        return (value if value.strip() else "",)


@register_stage("filter", "server")
class ServerFilterStage(PassThroughStage[T]):
    """Rows arrive already filtered by the caller."""
