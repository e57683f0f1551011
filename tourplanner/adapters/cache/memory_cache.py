"""In-memory cache for address lookups.

Keeps recent suggestion lists keyed by normalized query so that
retyping or backspacing to an earlier query is answered locally.
Entries expire after a TTL and the oldest entry is evicted first when
the cache is full.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """TTL cache implementing CachePort.

    Lookups run in worker threads, so access is guarded by a lock.

    Attributes:
        default_ttl_seconds: Lifetime of an entry (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[list](name="suggestions", default_ttl_seconds=600)
        cache.set("cape town:za", suggestions)
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _store: Dict[str, Tuple[Any, float]] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                return None
            return value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            if self.max_size is not None and key not in self._store:
                while self._store and len(self._store) >= self.max_size:
                    oldest = next(iter(self._store))
                    del self._store[oldest]
                    self._logger.debug("Cache evicted entry", extra={"key": oldest})
                if self.max_size <= 0:
                    return

            if self.default_ttl_seconds is None:
                expires_at = float("inf")
            else:
                expires_at = time.monotonic() + self.default_ttl_seconds
            self._store[key] = (value, expires_at)

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
        self._logger.info("Cache cleared", extra={"entries_cleared": count})
        return count

    def size(self) -> int:
        with self._lock:
            return len(self._store)
