from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Optional


@dataclass(frozen=True)
class ReportedIndex:
    uv_index: float
    reported_at: datetime


class LastKnownIndexStore:
    """Most recently *reported* UV index per location display name.

    Written only by the poll loop after a successful report. The lock lets the
    status API take consistent snapshots while the loop runs.
    """

    def __init__(self) -> None:
        self._items: Dict[str, ReportedIndex] = {}
        self._lock = Lock()

    def get(self, location: str) -> Optional[float]:
        with self._lock:
            item = self._items.get(location)
            return item.uv_index if item is not None else None

    def get_item(self, location: str) -> Optional[ReportedIndex]:
        with self._lock:
            return self._items.get(location)

    def put(self, location: str, uv_index: float, reported_at: Optional[datetime] = None) -> None:
        stamp = reported_at or datetime.now(timezone.utc)
        with self._lock:
            self._items[location] = ReportedIndex(uv_index=uv_index, reported_at=stamp)

    def scan(self) -> Dict[str, ReportedIndex]:
        """Return a snapshot of every stored entry."""

        with self._lock:
            return dict(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
