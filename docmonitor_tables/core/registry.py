"""Strategy lookup for the table pipeline.

Each pipeline stage ('filter', 'sort', 'paginate') has one strategy class per
operating mode. Strategies register themselves when ``docmonitor_tables.stages``
is imported; the orchestrator then picks the class matching a feature's
configured mode.
"""

from typing import TYPE_CHECKING, Dict, List, Tuple, Type

if TYPE_CHECKING:
    from .base import BaseStage

# stage name -> operating mode -> strategy class
_STRATEGIES: Dict[str, Dict[str, Type["BaseStage"]]] = {}


def register_stage(stage: str, mode: str):
    """
    Class decorator adding a strategy for one stage in one mode.

    The decorated class gets ``_stage_name`` and ``_mode`` set so instances
    can report what they implement.

    Example:
        @register_stage("sort", "server")
        class ServerSortStage(PassThroughStage):
            ...
    """

    def decorator(cls: Type["BaseStage"]) -> Type["BaseStage"]:
        modes = _STRATEGIES.setdefault(stage, {})
        existing = modes.get(mode)
        if existing is not None:
            raise ValueError(
                f"{stage}/{mode} already registered to {existing.__name__}; "
                f"cannot register {cls.__name__}"
            )
        modes[mode] = cls
        cls._stage_name = stage
        cls._mode = mode
        return cls

    return decorator


def modes_for(stage: str) -> List[str]:
    """Operating modes with a registered strategy for ``stage``, sorted."""
    return sorted(_STRATEGIES.get(stage, {}))


def get_stage_class(stage: str, mode: str) -> Type["BaseStage"]:
    """
    Resolve the strategy class for a feature.

    Args:
        stage: Pipeline stage name
        mode: The feature's operating mode

    Returns:
        The registered strategy class

    Raises:
        KeyError: If the stage is unknown or has no strategy for ``mode``
    """
    modes = _STRATEGIES.get(stage)
    if not modes:
        raise KeyError(
            f"Unknown pipeline stage '{stage}'; known stages: {sorted(_STRATEGIES)}"
        )
    if mode not in modes:
        raise KeyError(
            f"Stage '{stage}' has no '{mode}' strategy; "
            f"available modes: {modes_for(stage)}"
        )
    return modes[mode]


def list_registered_stages() -> Dict[Tuple[str, str], Type["BaseStage"]]:
    """Snapshot of every strategy, keyed by ``(stage, mode)``."""
    return {
        (stage, mode): cls
        for stage, modes in _STRATEGIES.items()
        for mode, cls in modes.items()
    }


def is_registered(stage: str, mode: str) -> bool:
    return mode in _STRATEGIES.get(stage, {})
