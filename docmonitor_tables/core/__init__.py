"""Core infrastructure for docmonitor_tables."""

from .base import BaseStage, PassThroughStage
from .cache import StageCache
from .errors import QueryError, TableConfigError
from .query import ApiQuery, QueryResult
from .registry import get_stage_class, register_stage
from .state import TableStateStore

__all__ = [
    "BaseStage",
    "PassThroughStage",
    "StageCache",
    "TableStateStore",
    "ApiQuery",
    "QueryResult",
    "register_stage",
    "get_stage_class",
    "TableConfigError",
    "QueryError",
]
