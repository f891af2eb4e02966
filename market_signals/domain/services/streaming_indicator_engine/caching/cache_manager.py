"""
Indicator Cache
===============
Key/value cache with per-entry TTL and approximate LRU eviction.

Features:
- Lazy expiry on read (expired entries are dropped when looked up)
- Explicit cleanup(): above max_size, evicts the oldest entries (at least 20%
  of max_size, and down to 80% of max_size), then sweeps expired entries
- Monotonic hit/miss counters for the lifetime of the cache

Key construction belongs to the caller (e.g. symbol + interval + time bucket).
"""

import time
from typing import Any, Callable, Dict, Optional

from ..core.types import CacheEntry, MISSING


class IndicatorCache:
    """
    Caches indicator values and candle responses with TTL.

    Size is only enforced by cleanup(); set() and get() never evict for
    capacity, so a burst of inserts can temporarily exceed max_size.
    """

    def __init__(self,
                 default_ttl: float = 30.0,
                 max_size: int = 1000,
                 logger=None,
                 clock: Callable[[], float] = time.time):
        """
        Initialize indicator cache.

        Args:
            default_ttl: TTL in seconds used when set() gets none
            max_size: Size above which cleanup() evicts the oldest entries
            logger: Optional StructuredLogger instance
            clock: Time source in seconds (injectable for tests)
        """
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._low_watermark = int(max_size * 0.8)
        self.logger = logger
        self._clock = clock

        self._cache: Dict[str, CacheEntry] = {}

        self._hits = 0
        self._misses = 0

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Insert or overwrite an entry stamped with the current time.

        Args:
            key: Cache key
            value: Value to cache (None is a valid value)
            ttl: TTL in seconds; falsy values fall back to default_ttl
        """
        self._cache[key] = CacheEntry(
            value=value,
            timestamp=self._clock(),
            ttl=ttl or self.default_ttl,
        )

    def get(self, key: str) -> Any:
        """
        Get cached value if present and unexpired.

        Returns:
            The cached value, or MISSING when absent or expired
        """
        entry = self._cache.get(key)
        if entry is None:
            self._misses += 1
            return MISSING

        if entry.is_expired(self._clock()):
            del self._cache[key]
            self._misses += 1
            return MISSING

        self._hits += 1
        return entry.value

    def __contains__(self, key: str) -> bool:
        entry = self._cache.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def size(self) -> int:
        return len(self._cache)

    def clear(self) -> int:
        """
        Remove all entries. Hit/miss counters are kept.

        Returns:
            Number of entries cleared
        """
        count = len(self._cache)
        self._cache.clear()
        if self.logger:
            self.logger.info("indicator_cache.cleared", {"entries_cleared": count})
        return count

    def cleanup(self) -> int:
        """
        Two-phase maintenance: oldest-20% eviction when over capacity,
        then removal of expired entries.

        Returns:
            Number of entries removed
        """
        evicted = 0
        if len(self._cache) > self.max_size:
            oldest_first = sorted(self._cache.items(), key=lambda item: item[1].timestamp)
            # At least 20% of max_size, and always down to the 80% watermark
            to_remove = max(int(self.max_size * 0.2), len(oldest_first) - self._low_watermark)
            for key, _ in oldest_first[:to_remove]:
                del self._cache[key]
            evicted = min(to_remove, len(oldest_first))

        now = self._clock()
        expired_keys = [key for key, entry in self._cache.items() if entry.is_expired(now)]
        for key in expired_keys:
            del self._cache[key]

        removed = evicted + len(expired_keys)
        if removed and self.logger:
            self.logger.debug("indicator_cache.cleanup", {
                "evicted_count": evicted,
                "expired_count": len(expired_keys),
                "remaining_entries": len(self._cache)
            })

        return removed

    def get_hit_rate(self) -> float:
        """Hit rate as a fraction (0.0 to 1.0)."""
        total = self._hits + self._misses
        if total == 0:
            return 0.0
        return self._hits / total

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            hit_rate as a percentage string with one decimal ("0" before any
            lookup), current size and configured max size
        """
        total = self._hits + self._misses
        return {
            "hit_rate": f"{self._hits / total * 100:.1f}" if total > 0 else "0",
            "size": len(self._cache),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
        }
