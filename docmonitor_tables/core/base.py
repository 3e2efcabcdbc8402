"""Base class for pipeline stage strategies."""

from abc import ABC, abstractmethod
from typing import Any, Generic, Hashable, Sequence, Tuple, TypeVar

from .types import CLIENT, Column

T = TypeVar("T")


class BaseStage(ABC, Generic[T]):
    """
    Abstract base class for one stage of the filter -> sort -> paginate pipeline.

    Each feature has two strategies registered with ``register_stage``:
    a client strategy that computes the stage locally and a server strategy
    that passes rows through untouched because the caller already applied
    the stage to the data it supplied.

    Attributes:
        _config: The feature configuration this stage runs with
        _stage_name: Class-level pipeline stage name (set by the registry)
        _mode: Class-level operating mode (set by the registry)
    """

    _stage_name: str = ""
    _mode: str = ""

    def __init__(self, config: Any):
        """
        Initialize the stage.

        Args:
            config: Already coerced feature configuration
        """
        self._config = config

    @property
    def config(self) -> Any:
        return self._config

    @property
    def stage_name(self) -> str:
        return self._stage_name

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def computes_locally(self) -> bool:
        """True when this strategy transforms rows itself."""
        return self._mode == CLIENT

    @abstractmethod
    def apply(self, rows: Sequence[T], columns: Sequence[Column]) -> Sequence[T]:
        """
        Run the stage.

        Args:
            rows: Output of the previous stage
            columns: Declared column descriptors

        Returns:
            Rows for the next stage
        """
        pass

    def signature(self) -> Tuple[Hashable, ...]:
        """
        Return the state that determines this stage's output.

        Used as part of the memoization key, so changes to any value returned
        here trigger recomputation. Pass-through stages have no state.
        """
        return ()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"stage='{self._stage_name}', mode='{self._mode}', "
            f"signature={self.signature()})"
        )


class PassThroughStage(BaseStage[T]):
    """Server-mode strategy: the caller already applied this stage."""

    def apply(self, rows: Sequence[T], columns: Sequence[Column]) -> Sequence[T]:
        return rows
