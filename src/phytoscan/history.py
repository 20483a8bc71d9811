"""Scan history — bounded, most-recent-first log of past diagnoses."""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional

from phytoscan.result import AnalysisResult
from phytoscan.types import DiseaseStage

DEFAULT_CAPACITY = 50


@dataclass(frozen=True)
class HistoryItem:
    """Summary of one diagnosis kept in history."""

    id: str
    timestamp: str  # ISO-8601
    stage: DiseaseStage
    disease_name: str
    confidence: float
    severity_score: int

    @classmethod
    def from_result(cls, result: AnalysisResult, item_id: Optional[str] = None) -> HistoryItem:
        """Summarize a result. A random id is generated when none is given."""
        return cls(
            id=item_id or uuid.uuid4().hex,
            timestamp=result.timestamp.isoformat(),
            stage=result.stage,
            disease_name=result.disease.name,
            confidence=result.confidence,
            severity_score=result.severity_score,
        )


class HistoryLog:
    """Ring buffer of HistoryItems, newest first.

    Once ``capacity`` items are stored, each append drops the oldest item.

    Args:
        capacity: Maximum number of items kept.
        items: Initial items, newest first. Items past capacity are dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, items: Optional[list[HistoryItem]] = None):
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: deque[HistoryItem] = deque(maxlen=capacity)
        # extend from the oldest end so the newest ends up at the left
        for item in reversed(list(items or [])[:capacity]):
            self._items.appendleft(item)

    def append(self, item: HistoryItem) -> None:
        """Add the newest item, evicting the oldest when full."""
        self._items.appendleft(item)

    def items(self) -> list[HistoryItem]:
        """Snapshot of all items, newest first."""
        return list(self._items)

    @property
    def latest(self) -> Optional[HistoryItem]:
        return self._items[0] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"HistoryLog(capacity={self.capacity}, size={len(self)})"


__all__ = ["HistoryItem", "HistoryLog", "DEFAULT_CAPACITY"]
