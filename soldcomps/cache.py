from __future__ import annotations

import copy
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_TTL_SECONDS = 60 * 60


@dataclass(frozen=True, slots=True)
class CacheEntry:
    query: str
    payload: dict[str, Any]
    created_at: float


class ResultCache:
    """In-process response cache keyed by the exact query string.

    Entries expire lazily: staleness is only checked on ``get``. When more than
    ``max_entries`` queries are stored the oldest write is evicted, so the
    default of one keeps just the most recent query.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        max_entries: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = int(max_entries)
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, query: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(query)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self.ttl_seconds:
                del self._entries[query]
                return None
            return copy.deepcopy(entry.payload)

    def set(self, query: str, payload: dict[str, Any]) -> None:
        entry = CacheEntry(query=query, payload=copy.deepcopy(payload), created_at=self._clock())
        with self._lock:
            self._entries.pop(query, None)
            self._entries[query] = entry
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
