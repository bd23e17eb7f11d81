# backend/services/cache.py
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 600


@dataclass
class CacheEntry:
    payload: Dict
    fetched_at: float


class ResponseCache:
    """In-process weather cache with a fixed TTL.

    Stale entries are dropped when a read finds them expired; nothing sweeps
    the map in the background and it has no size bound. Concurrent misses for
    the same key may both write; the last write wins.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Dict]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.fetched_at >= self.ttl:
            self._entries.pop(key, None)
            return None
        return entry.payload

    def put(self, key: str, payload: Dict):
        self._entries[key] = CacheEntry(payload=payload, fetched_at=self.clock())

    def entry(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key):
        return key in self._entries
