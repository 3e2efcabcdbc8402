"""Pipeline stage strategies. Importing this package registers them."""

from .filter import ClientFilterStage, ServerFilterStage
from .paginate import ClientPaginateStage, ServerPaginateStage
from .sort import ClientSortStage, ServerSortStage

PIPELINE_ORDER = ("filter", "sort", "paginate")

__all__ = [
    "PIPELINE_ORDER",
    "ClientFilterStage",
    "ServerFilterStage",
    "ClientSortStage",
    "ServerSortStage",
    "ClientPaginateStage",
    "ServerPaginateStage",
]
