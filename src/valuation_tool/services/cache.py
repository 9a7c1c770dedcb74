"""
In-process TTL cache for fetched documents.

Entries expire after their TTL and are dropped on the next read. The cache
is per-process; multiple API workers each keep their own.
"""
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class TTLCache:
    """Thread-safe key/value cache with per-entry expiry."""
    
    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
    
    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.data
    
    def set(self, key: str, data: Any, ttl: Optional[float] = None):
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(data=data, expires_at=self._clock() + ttl)
    
    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)
    
    def clear(self):
        with self._lock:
            self._entries.clear()
