"""Merge strategies for record batches received from the sync layer.

Merging remote records into local state is not implemented yet. Every
category defaults to ``DeferredMerge``, which accepts the batch and logs it.
A real merge for a category plugs in through ``MergeRegistry.register``.
"""

from __future__ import annotations

from collections import deque
import logging
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Protocol, Sequence

from .categories import CATEGORY_NAMES

logger = logging.getLogger("sitesync.sync.merge")

HISTORY_LIMIT = 100


@dataclass
class MergeResult:
    """Outcome of handing one inbound batch to a strategy."""

    category: str
    received: int
    applied: int = 0
    deferred: int = 0
    message: str = ""


class MergeStrategy(Protocol):
    def merge(self, category: str, records: Sequence[Any]) -> MergeResult:
        ...


class DeferredMerge:
    """Accept inbound records without applying them to local state."""

    def merge(self, category: str, records: Sequence[Any]) -> MergeResult:
        logger.info("Received %d %s record(s); merge deferred", len(records), category)
        return MergeResult(
            category=category,
            received=len(records),
            deferred=len(records),
            message="Merge not implemented",
        )


class MergeRegistry:
    """Routes inbound batches to the strategy registered for their category."""

    def __init__(
        self,
        default: Optional[MergeStrategy] = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        self._default = default or DeferredMerge()
        self._strategies: Dict[str, MergeStrategy] = {}
        # Oldest results drop off once the limit is reached
        self.history: Deque[MergeResult] = deque(maxlen=history_limit)

    def register(self, category: str, strategy: MergeStrategy) -> None:
        if category not in CATEGORY_NAMES:
            raise ValueError(f"Unknown sync category '{category}'.")
        self._strategies[category] = strategy

    def strategy_for(self, category: str) -> MergeStrategy:
        return self._strategies.get(category, self._default)

    def merge(self, category: str, records: Sequence[Any]) -> MergeResult:
        result = self.strategy_for(category).merge(category, records)
        self.history.append(result)
        return result


__all__ = ["HISTORY_LIMIT", "MergeResult", "MergeStrategy", "DeferredMerge", "MergeRegistry"]
