"""Persistence layer for HistoryLog.

JSON save/load with enum ↔ stage code conversion.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from phytoscan.history import DEFAULT_CAPACITY, HistoryItem, HistoryLog
from phytoscan.types import DiseaseStage

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def save_history(log: HistoryLog, path: str | Path) -> None:
    """Save a HistoryLog to JSON.

    Items are written newest first. Includes _version metadata.

    Args:
        log: HistoryLog instance to save.
        path: Output JSON file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "capacity": log.capacity,
        "items": [_item_to_dict(item) for item in log.items()],
        "_version": {
            "app": "phytoscan",
            "app_version": APP_VERSION,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Saved %d history items to %s", len(log), path)


def load_history(path: str | Path, capacity: int | None = None) -> HistoryLog:
    """Load a HistoryLog from JSON.

    Args:
        path: Path to history.json.
        capacity: Override the stored capacity. Items beyond it are dropped,
            oldest first.

    Returns:
        HistoryLog instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid history JSON.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"History file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"History file has unexpected format: {path}")

    try:
        items = [_dict_to_item(item) for item in data.get("items", [])]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"History file has a malformed entry: {path}: {e}") from e

    if capacity is None:
        capacity = data.get("capacity", DEFAULT_CAPACITY)
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"History file has a malformed capacity {capacity!r}: {path}")

    return HistoryLog(capacity=capacity, items=items)


def _item_to_dict(item: HistoryItem) -> dict:
    """Convert HistoryItem to JSON-serializable dict."""
    return {
        "id": item.id,
        "timestamp": item.timestamp,
        "stage": item.stage.value,
        "disease_name": item.disease_name,
        "confidence": item.confidence,
        "severity_score": item.severity_score,
    }


def _dict_to_item(data: dict) -> HistoryItem:
    """Convert dict from JSON to HistoryItem."""
    return HistoryItem(
        id=data["id"],
        timestamp=data["timestamp"],
        stage=DiseaseStage(data["stage"]),
        disease_name=data.get("disease_name", ""),
        confidence=float(data.get("confidence", 0.0)),
        severity_score=int(data.get("severity_score", 0)),
    )
