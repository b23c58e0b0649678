"""
In-Memory TTL Cache.

Thread-safe key/value cache with per-entry TTL and LRU eviction.
Used by HvacApiClient (GET responses), QuoteManagementService,
ComplianceService and as memory tier of HvacCacheStrategy.

Business Rules:
    - Expired entries are dropped on read (lazy expiry)
    - When max_entries is exceeded, least recently used entry is evicted
    - Stats: hits, misses, evictions, size
"""

import fnmatch
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    value: Any
    expires_at: float
    access_count: int = 0


class MemoryCache:
    """
    In-process TTL cache with LRU eviction.

    Examples:
        >>> cache = MemoryCache(default_ttl=300)
        >>> cache.set("quote_42", {"id": "42"})
        >>> cache.get("quote_42")
        {'id': '42'}
        >>> cache.invalidate_substring("quote_")
        1
    """

    def __init__(
        self,
        default_ttl: float = 300,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            default_ttl: TTL in seconds used when set() gets no ttl
            max_entries: Capacity before LRU eviction
            clock: Monotonic time source in seconds (injectable for tests)
        """
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return default
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self.misses += 1
                return default

            entry.access_count += 1
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def contains(self, key: str) -> bool:
        """Check presence of a live entry without touching stats."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.expires_at > self._clock()

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Evicted cache entry: {evicted}")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, _MISSING) is not _MISSING

    def invalidate_substring(self, fragment: str) -> int:
        """Remove every key containing fragment. Returns number removed."""
        with self._lock:
            keys = [key for key in self._entries if fragment in key]
            for key in keys:
                del self._entries[key]
        if keys:
            logger.debug(f"Invalidated {len(keys)} cache entries containing '{fragment}'")
        return len(keys)

    def invalidate_pattern(self, pattern: str) -> int:
        """Remove every key matching glob pattern (fnmatch). Returns number removed."""
        with self._lock:
            keys = [key for key in self._entries if fnmatch.fnmatchcase(key, pattern)]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "size": len(self._entries),
            }
