"""Memoization of pipeline stage results.

The pure processing functions never cache anything themselves. The
orchestrator keeps one ``StageCache`` per table and looks results up by an
explicit key built from the data revision and each stage's signature, so a
stage is recomputed exactly when one of its inputs changed.
"""

import json
import logging
from typing import Any, Dict, Hashable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def make_hashable(value: Any) -> Hashable:
    """
    Convert a value to a hashable form for use in cache keys.

    Handles dicts and lists by converting to JSON strings.

    Args:
        value: Any config or state value

    Returns:
        A hashable version of the value
    """
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, default=str)
    if isinstance(value, list):
        return json.dumps(value, default=str)
    return value


class StageCache:
    """
    Per-table cache holding exactly one entry per pipeline stage.

    When a stage's key changes the old entry is replaced, so memory stays
    bounded by the number of stages.
    """

    def __init__(self):
        self._entries: Dict[str, Tuple[Hashable, Sequence[Any]]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, stage: str, key: Hashable) -> Optional[Sequence[Any]]:
        """
        Get cached rows for a stage if the key matches.

        Args:
            stage: Pipeline stage name
            key: Full input key of the stage

        Returns:
            Cached rows on a hit, None on a miss
        """
        entry = self._entries.get(stage)
        if entry is not None and entry[0] == key:
            self.hits += 1
            return entry[1]
        self.misses += 1
        return None

    def set(self, stage: str, key: Hashable, rows: Sequence[Any]) -> None:
        """Store rows for a stage, replacing any previous entry."""
        self._entries[stage] = (key, rows)

    def invalidate(self, stage: Optional[str] = None) -> None:
        """Drop one stage's entry, or all entries when ``stage`` is None."""
        if stage is None:
            self._entries.clear()
        else:
            self._entries.pop(stage, None)
        logger.debug("Invalidated stage cache entry: %s", stage or "all")

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"StageCache(stages={sorted(self._entries)}, "
            f"hits={self.hits}, misses={self.misses})"
        )
